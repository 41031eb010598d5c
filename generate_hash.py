"""
Génère la valeur ADMIN_PASSWORD_HASH (bcrypt, coût 10) à placer dans .env.

Usage:
    python generate_hash.py            # saisie masquée du mot de passe
    python generate_hash.py --check "$ADMIN_PASSWORD_HASH"
"""
import argparse
import getpass
import sys

from storefront.auth.service import check_password, hash_password

def generate_hash(password: str, rounds: int = 10) -> str:
    if not password:
        raise ValueError("password must not be empty")
    return hash_password(password, rounds=rounds)

def main(argv=None, read_password=getpass.getpass) -> int:
    parser = argparse.ArgumentParser(description="bcrypt hash for ADMIN_PASSWORD_HASH")
    parser.add_argument("--rounds", type=int, default=10)
    parser.add_argument("--check", metavar="HASH", help="vérifie un mot de passe contre un hash existant")
    args = parser.parse_args(argv)

    password = read_password("Admin password: ")
    if args.check:
        match = check_password(password, args.check)
        print(f"Correspondance du hash: {match}")
        return 0 if match else 1
    try:
        print(f"ADMIN_PASSWORD_HASH={generate_hash(password, rounds=args.rounds)}")
    except ValueError as e:
        print(f"Erreur: {e}", file=sys.stderr)
        return 2
    return 0

if __name__ == "__main__":
    sys.exit(main())
