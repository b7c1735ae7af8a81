import json
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)

listings_path = "data/listings.json"

BLOCK_SIZE = 10

LISTING_KEYS = ("id", "location_id", "length", "width", "price_in_cents")


class CatalogError(ValueError):
    pass


def load_listings(listings_path=listings_path):
    with open(listings_path) as f:
        raw_listings = json.load(f)

    if not isinstance(raw_listings, list):
        raise CatalogError(f"{listings_path}: expected a JSON array of listings")

    listings = []
    for i, listing in enumerate(raw_listings):
        missing = [key for key in LISTING_KEYS if key not in listing]
        if missing:
            raise CatalogError(f"{listings_path}: listing {i} is missing {', '.join(missing)}")
        listings.append({key: listing[key] for key in LISTING_KEYS})

    logger.info("Loaded %d listings from %s", len(listings), listings_path)
    return listings


def group_by_location(listings: list[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    locations = dict()
    for listing in listings:
        locations.setdefault(listing["location_id"], []).append(listing)
    return locations


def parse_vehicle_query(vehicle_query):
    """Expand (length, quantity) items into one length per vehicle, largest first."""
    vehicles = []
    for query_item in vehicle_query:
        quantity = query_item["quantity"]
        vehicles.extend([query_item["length"] for i in range(quantity)])
    vehicles.sort(reverse=True)
    return vehicles


def find_free_run(row: list[bool], blocks: int) -> int:
    for start in range(len(row) - blocks + 1):
        if not any(row[start:start + blocks]):
            return start
    return -1


def pack_orientation(length: int, width: int, vehicles: list[int]) -> tuple[list[int], int]:
    """
    First-fit placement of ``vehicles`` onto a grid of ``width // BLOCK_SIZE`` rows
    by ``length // BLOCK_SIZE`` columns. Each vehicle takes ``vehicle // BLOCK_SIZE``
    consecutive cells of a single row.

    Returns the vehicles that found no room, in input order, and how many were placed.
    """
    rows, cols = width // BLOCK_SIZE, length // BLOCK_SIZE
    grid = [[False] * cols for _ in range(rows)]

    unplaced = []
    packed = 0
    for vehicle in vehicles:
        blocks = vehicle // BLOCK_SIZE
        for row in grid:
            start = find_free_run(row, blocks)
            if start >= 0:
                row[start:start + blocks] = [True] * blocks
                packed += 1
                break
        else:
            unplaced.append(vehicle)

    return unplaced, packed


def pack_vehicles(listing: dict[str, Any], vehicles: list[int]) -> tuple[list[int], int]:
    orientations = [
        (listing["length"], listing["width"]),
        (listing["width"], listing["length"]),
    ]

    best_unplaced, best_packed = list(vehicles), 0
    for length, width in orientations:
        unplaced, packed = pack_orientation(length, width, vehicles)
        # strictly greater, so the first orientation keeps ties
        if packed > best_packed:
            best_unplaced, best_packed = unplaced, packed
    return best_unplaced, best_packed


def solve_location(location_id: str, listings: list[dict[str, Any]], vehicles: list[int]) -> Optional[dict[str, Any]]:
    """
    Greedily take the cheapest listings at one location until every vehicle is placed.

    Listings that hold none of the remaining vehicles are skipped. Returns None when
    the location runs out of listings first; partial fits are never reported.
    """
    remaining = list(vehicles)
    listing_ids = []
    total_price_in_cents = 0

    for listing in sorted(listings, key=lambda x: x["price_in_cents"]):
        if not remaining:
            break
        unplaced, packed = pack_vehicles(listing, remaining)
        if packed > 0:
            listing_ids.append(listing["id"])
            total_price_in_cents += listing["price_in_cents"]
            remaining = unplaced

    if remaining:
        logger.debug("Location %s leaves %d vehicles unplaced", location_id, len(remaining))
        return None

    return {
        "location_id": location_id,
        "listing_ids": listing_ids,
        "total_price_in_cents": total_price_in_cents,
    }


def find_valid_combinations(vehicles: list[int], listings: list[dict[str, Any]]) -> list[dict[str, Any]]:
    results = []
    for location_id, location_listings in group_by_location(listings).items():
        result = solve_location(location_id, location_listings, vehicles)
        if result is not None:
            results.append(result)

    results.sort(key=lambda x: x["total_price_in_cents"])
    return results


def findListings(vehicle_query, listings):
    vehicles = parse_vehicle_query(vehicle_query)
    results = find_valid_combinations(vehicles, listings)
    logger.info("Matched %d vehicles to %d locations", len(vehicles), len(results))
    return results
