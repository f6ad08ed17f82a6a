#!/usr/bin/env python3
"""
Generate a secure SECRET_KEY for the Vakio row generator
"""

import secrets


def generate_secrets():
    """Print a random key ready to paste into .env"""
    print("Generating secure secrets for Vakio...")
    print("=" * 50)

    print(f"SECRET_KEY={secrets.token_urlsafe(32)}")

    print("=" * 50)
    print("Copy this value to your .env file and keep it out of version control.")


if __name__ == "__main__":
    generate_secrets()
