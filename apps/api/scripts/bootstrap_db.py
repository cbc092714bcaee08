"""Create database schema, install overlap constraints and seed demo listings."""
from __future__ import annotations

import asyncio
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import delete, text

from rental_calendar.db.session import SessionLocal, engine
from rental_calendar.models import AvailabilityRule, BlackoutPeriod, Booking, BookingStatus, Listing
from rental_calendar.models.base import Base
from rental_calendar.models.blackout_period import BLACKOUT_OVERLAP_CONSTRAINT
from rental_calendar.models.booking import BOOKING_OVERLAP_CONSTRAINT
from rental_calendar.services.pricing import calculate_total_price

# Booking ranges are half-open so back-to-back rentals do not collide;
# blackout periods are inclusive on both ends.
EXCLUSION_CONSTRAINTS = {
	"bookings": (
		BOOKING_OVERLAP_CONSTRAINT,
		"EXCLUDE USING gist (listing_id WITH =, daterange(check_in_date, check_out_date, '[)') WITH &&)"
		" WHERE (status IN ('pending', 'confirmed', 'completed'))",
	),
	"blackout_periods": (
		BLACKOUT_OVERLAP_CONSTRAINT,
		"EXCLUDE USING gist (listing_id WITH =, daterange(start_date, end_date, '[]') WITH &&)",
	),
}

TODAY = date.today()

LISTINGS = [
	{
		"id": "listing-camera-kit",
		"owner_id": "user-owner-nadia",
		"title": "Mirrorless Camera Kit",
		"price_per_day": Decimal("45.00"),
		# Pickups only on Friday and Saturday.
		"weekdays": [5, 6],
		"blackouts": [
			(TODAY + timedelta(days=20), TODAY + timedelta(days=24), "Family trip"),
		],
		"bookings": [
			("booking-camera-1", "user-renter-omar", TODAY + timedelta(days=5), TODAY + timedelta(days=8), BookingStatus.CONFIRMED),
		],
	},
	{
		"id": "listing-kayak",
		"owner_id": "user-owner-bilal",
		"title": "Two-person Sea Kayak",
		"price_per_day": Decimal("30.00"),
		"weekdays": None,
		"blackouts": [],
		"bookings": [
			("booking-kayak-1", "user-renter-sara", TODAY + timedelta(days=3), TODAY + timedelta(days=6), BookingStatus.PENDING),
			("booking-kayak-2", "user-renter-omar", TODAY + timedelta(days=6), TODAY + timedelta(days=9), BookingStatus.CONFIRMED),
			("booking-kayak-3", "user-renter-sara", TODAY + timedelta(days=12), TODAY + timedelta(days=14), BookingStatus.CANCELLED),
		],
	},
]


async def create_schema() -> None:
	"""Create the database schema if it does not already exist."""

	async with engine.begin() as conn:
		await conn.run_sync(Base.metadata.create_all)


async def install_exclusion_constraints() -> None:
	"""Add the storage-level overlap guards unless they are already present."""

	async with engine.begin() as conn:
		await conn.execute(text("CREATE EXTENSION IF NOT EXISTS btree_gist"))
		for table, (name, definition) in EXCLUSION_CONSTRAINTS.items():
			exists = await conn.scalar(
				text("SELECT 1 FROM pg_constraint WHERE conname = :name"),
				{"name": name},
			)
			if exists:
				continue
			await conn.execute(text(f"ALTER TABLE {table} ADD CONSTRAINT {name} {definition}"))


async def seed_listings() -> None:
	"""Insert or refresh demo listings with their rules, blackouts and bookings."""

	async with SessionLocal() as session:
		async with session.begin():
			for data in LISTINGS:
				listing = await session.get(Listing, data["id"])
				if listing is None:
					listing = Listing(id=data["id"])
					session.add(listing)
				listing.owner_id = data["owner_id"]
				listing.title = data["title"]
				listing.price_per_day = data["price_per_day"]
				listing.status = "active"
				listing.availability_restricted = data["weekdays"] is not None

				await session.execute(delete(AvailabilityRule).where(AvailabilityRule.listing_id == data["id"]))
				await session.execute(delete(BlackoutPeriod).where(BlackoutPeriod.listing_id == data["id"]))
				await session.execute(delete(Booking).where(Booking.listing_id == data["id"]))
				await session.flush()

				for weekday in data["weekdays"] or []:
					session.add(AvailabilityRule(listing_id=data["id"], weekday=weekday))

				for index, (start, end, reason) in enumerate(data["blackouts"], start=1):
					session.add(
						BlackoutPeriod(
							id=f"{data['id']}-blackout-{index}",
							listing_id=data["id"],
							start_date=start,
							end_date=end,
							reason=reason,
						)
					)

				for booking_id, renter_id, check_in, check_out, booking_status in data["bookings"]:
					session.add(
						Booking(
							id=booking_id,
							listing_id=data["id"],
							renter_id=renter_id,
							owner_id=data["owner_id"],
							check_in_date=check_in,
							check_out_date=check_out,
							total_price=calculate_total_price(data["price_per_day"], check_in, check_out),
							status=booking_status,
						)
					)


async def main() -> None:
	await create_schema()
	await install_exclusion_constraints()
	await seed_listings()
	print("Database schema ensured, overlap constraints installed and demo data seeded.")


if __name__ == "__main__":
	asyncio.run(main())
