"""Create the bookmark schema and seed demo bookmarks for development."""
from __future__ import annotations

import asyncio

from mytrip.db.session import SessionLocal, create_schema
from mytrip.repositories import bookmarks as bookmarks_repo

DEMO_USER_ID = "demo-user"

# Well-known Seoul sights: 경복궁, 창덕궁, 남산서울타워.
DEMO_CONTENT_IDS = [
	"126508",
	"126512",
	"126535",
]


async def seed_bookmarks() -> int:
	"""Bookmark the demo contents for the demo user; returns how many were new."""

	created = 0
	async with SessionLocal() as session:
		async with session.begin():
			for content_id in DEMO_CONTENT_IDS:
				bookmark = await bookmarks_repo.add(session, user_id=DEMO_USER_ID, content_id=content_id)
				if bookmark is not None:
					created += 1
	return created


async def main() -> None:
	await create_schema()
	created = await seed_bookmarks()
	print(f"Database schema ensured and {created} demo bookmarks seeded.")


if __name__ == "__main__":
	asyncio.run(main())
