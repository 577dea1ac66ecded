"""Issue an access token for a frame owner.

Usage:
    python create_token.py user-123 --days 365
"""
import argparse

from frame_studio_api.app.core.security import create_access_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Issue a Frame Studio access token.")
    ap.add_argument("user_id", help="Owner identifier stored in the token subject")
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days")
    args = ap.parse_args()
    print(create_access_token({"sub": args.user_id}, expires_delta=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
