# src/cli/run_demo.py

"""
Convenience script for demonstration:

python src/cli/run_demo.py
"""

from acstep.main import run_matcher


def main():
    print("[+] Stepping the classic he/she/his/hers automaton over a sample text.")
    matches = run_matcher(["he", "she", "his", "hers"], "she sells seashells",
                          step=True, verify=True)

    if not matches:
        print("[-] No matches")
    else:
        print(f"[+] {len(matches)} matches found.")


if __name__ == "__main__":
    main()
