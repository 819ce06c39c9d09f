#!/usr/bin/env python3
"""
Demo seed script — populates the catalog with sample data for demos.

!! NOT FOR PRODUCTION !!
This script creates users with known passwords and a handful of books.
It is intended ONLY for local demos and frontend development.

Usage:
    # With the API server running on localhost:8000:
    python demo/seed.py

    # Reset the database and re-seed:
    python demo/seed.py --reset

    # Custom server URL:
    python demo/seed.py --base-url http://localhost:9000

Login credentials after seeding:
    ┌──────────────────────────────┬───────────────────┬───────┐
    │ Email                        │ Password          │ Role  │
    ├──────────────────────────────┼───────────────────┼───────┤
    │ admin@catalogdemo.com        │ AdminDemo123!     │ ADMIN │
    │ alice.chen@example.com       │ AliceDemo123!     │ USER  │
    │ bob.martinez@example.com     │ BobDemo123!       │ USER  │
    └──────────────────────────────┴───────────────────┴───────┘
"""

import argparse
import asyncio
import os

import httpx

BASE_URL = "http://localhost:8000"

# ---------------------------------------------------------------------------
# Demo users
# ---------------------------------------------------------------------------

ADMIN = {
    "username": "admin",
    "email": "admin@catalogdemo.com",
    "password": "AdminDemo123!",
}

USERS = [
    {"username": "alice", "email": "alice.chen@example.com", "password": "AliceDemo123!"},
    {"username": "bob", "email": "bob.martinez@example.com", "password": "BobDemo123!"},
]

# ---------------------------------------------------------------------------
# Demo books
# ---------------------------------------------------------------------------

BOOKS = [
    {"title": "Dune", "author": "Frank Herbert", "genre": "sci-fi", "publication_year": 1965,
     "description": "A desert planet, a spice that extends life, and a young heir's fall and rise."},
    {"title": "Neuromancer", "author": "William Gibson", "genre": "sci-fi", "publication_year": 1984,
     "description": "A washed-up hacker is hired for one last job in cyberspace."},
    {"title": "The Hobbit", "author": "J. R. R. Tolkien", "genre": "fantasy", "publication_year": 1937,
     "description": "A homebody hobbit is swept into a quest to reclaim a dwarven kingdom."},
    {"title": "A Wizard of Earthsea", "author": "Ursula K. Le Guin", "genre": "fantasy",
     "publication_year": 1968,
     "description": "A gifted young mage unleashes a shadow and must hunt it down."},
    {"title": "The Shining", "author": "Stephen King", "genre": "horror", "publication_year": 1977,
     "description": "A winter caretaker's family is trapped in a haunted mountain hotel."},
    {"title": "Pride and Prejudice", "author": "Jane Austen", "genre": "romance",
     "publication_year": 1813,
     "description": "Elizabeth Bennet spars with the proud Mr. Darcy."},
    {"title": "The Hound of the Baskervilles", "author": "Arthur Conan Doyle", "genre": "mystery",
     "publication_year": 1902,
     "description": "Sherlock Holmes investigates a family curse on the moors."},
    {"title": "Three Men in a Boat", "author": "Jerome K. Jerome", "genre": "comedy",
     "publication_year": 1889,
     "description": "Three friends and a dog take a boating holiday on the Thames."},
    {"title": "The Diary of a Young Girl", "author": "Anne Frank", "genre": "biography",
     "publication_year": 1947,
     "description": "The diary kept by a Jewish girl hiding in Amsterdam during the war."},
    {"title": "SPQR", "author": "Mary Beard", "genre": "history", "publication_year": 2015,
     "description": "A history of ancient Rome from its founding myths to 212 AD."},
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def log(msg: str) -> None:
    print(f"  {msg}")


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def signup(client: httpx.AsyncClient, user: dict) -> None:
    """Sign up a user; an existing account (409) is fine."""
    resp = await client.post(f"{BASE_URL}/auth/signup", json=user)
    if resp.status_code == 409:
        log(f"{user['email']} already exists")
        return
    resp.raise_for_status()
    log(f"Signed up {user['email']}")


async def login(client: httpx.AsyncClient, user: dict) -> str:
    """Log in a user, return the session token."""
    resp = await client.post(
        f"{BASE_URL}/auth/login",
        json={"email": user["email"], "password": user["password"]},
    )
    resp.raise_for_status()
    return resp.json()["token"]


async def add_book(client: httpx.AsyncClient, token: str, book: dict) -> None:
    resp = await client.post(f"{BASE_URL}/books", json=book, headers=auth_header(token))
    resp.raise_for_status()
    log(f"[{book['genre']}] {book['title']}")


async def seed(base_url: str) -> None:
    global BASE_URL
    BASE_URL = base_url

    print("\n========================================")
    print("  Seeding Book Catalog demo data")
    print("========================================")

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            resp = await client.get(f"{BASE_URL}/health")
            resp.raise_for_status()
        except (httpx.ConnectError, httpx.HTTPStatusError):
            print(f"\n  Cannot reach the API at {BASE_URL}. Is the server running?\n")
            return

        print("\nCreating users...")
        await signup(client, ADMIN)
        for user in USERS:
            await signup(client, user)

        # There is no self-service admin promotion; do it in the database
        from promote_admin import promote
        await promote(ADMIN["email"])
        log(f"Promoted {ADMIN['email']} to admin")

        print("\nAdding books...")
        token = await login(client, ADMIN)
        for book in BOOKS:
            await add_book(client, token, book)

    print("\n========================================")
    print("  SEED COMPLETE — Login Credentials")
    print("========================================")
    print(f"\n  {'Email':<30s} {'Password':<20s} {'Role'}")
    print(f"  {'─' * 30} {'─' * 20} {'─' * 5}")
    print(f"  {ADMIN['email']:<30s} {ADMIN['password']:<20s} ADMIN")
    for user in USERS:
        print(f"  {user['email']:<30s} {user['password']:<20s} USER")
    print()


def reset_database() -> None:
    """Delete the SQLite database file so the server recreates it on restart."""
    db_path = os.path.join(os.path.dirname(__file__), "..", "data", "catalog.db")
    db_path = os.path.normpath(db_path)

    if os.path.exists(db_path):
        os.remove(db_path)
        print(f"\n  Deleted {db_path}")
        print("  Restart the server to recreate empty tables.\n")
    else:
        print(f"\n  No database found at {db_path}\n")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Demo seed script — NOT FOR PRODUCTION",
        epilog="Creates sample users and books for demos.",
    )
    parser.add_argument(
        "--base-url", default="http://localhost:8000",
        help="Base URL of the running API (default: http://localhost:8000)",
    )
    parser.add_argument(
        "--reset", action="store_true",
        help="Delete the database file and exit (restart server to recreate)",
    )
    args = parser.parse_args()

    if args.reset:
        reset_database()
        return

    await seed(args.base_url)


if __name__ == "__main__":
    asyncio.run(main())
