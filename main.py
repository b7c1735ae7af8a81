import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from findListings import findListings, load_listings

load_dotenv()

LISTINGS_PATH = os.getenv("LISTINGS_PATH", "data/listings.json")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.listings = load_listings(LISTINGS_PATH)
    yield


app = FastAPI(title="Multi Vehicle Search", lifespan=lifespan)


class VehicleQuery(BaseModel):
    length: int = Field(gt=0)
    quantity: int = Field(ge=0)


class LocationResult(BaseModel):
    location_id: str
    listing_ids: list[str]
    total_price_in_cents: int


def parse_vehicle_queries(vehicle_queries: list[VehicleQuery]) -> list[dict[str, int]]:
    parsed = []
    for query in vehicle_queries:
        parsed.append({"length": query.length, "quantity": query.quantity})
    return parsed


def get_listings(request: Request) -> list[dict]:
    return request.app.state.listings


@app.exception_handler(RequestValidationError)
async def invalid_request(request: Request, exc: RequestValidationError):
    logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"detail": "invalid request"})


@app.get("/")
def root(listings: list[dict] = Depends(get_listings)):
    return {"message": "ok", "listings": len(listings)}


@app.post("/", response_model=list[LocationResult])
def get_items(vehicle_queries: list[VehicleQuery], listings: list[dict] = Depends(get_listings)):
    parsed_vehicle_queries = parse_vehicle_queries(vehicle_queries)
    return findListings(parsed_vehicle_queries, listings)
