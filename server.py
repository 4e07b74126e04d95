"""HTTP API: World Bank proxy and saved life-data snapshots."""

from __future__ import annotations

import logging

from fastapi import Body, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import ValidationError

from config import DATABASE_URL, SITE_URL, SITEMAP_LASTMOD
from storage import LifeDataCreate, LifeDataStore, create_db_engine, init_db
from worldbank import CountryCache, WorldBankClient

logger = logging.getLogger(__name__)

# SQLite INTEGER primary keys are signed 64-bit
MAX_RECORD_ID = 2**63 - 1


def _serialize(record) -> dict:
    return {
        "id": record.id,
        "user_id": record.user_id,
        "birthdate": record.birthdate.isoformat(),
        "country_code": record.country_code,
        "activities": record.activities,
        "created_at": record.created_at.isoformat(),
        "updated_at": record.updated_at.isoformat(),
    }


def create_app(
    store: LifeDataStore | None = None,
    client: WorldBankClient | None = None,
) -> FastAPI:
    """Build the API around a snapshot store and a World Bank client.

    Both collaborators default to real instances: a store on
    ``DATABASE_URL`` and a client with its own :class:`CountryCache` that
    writes through to the store.
    """
    if store is None:
        engine = create_db_engine(DATABASE_URL)
        init_db(engine)
        store = LifeDataStore(engine)
    if client is None:
        client = WorldBankClient(cache=CountryCache(), store=store)

    app = FastAPI(title="Lifetime Visualizer API")
    app.state.store = store
    app.state.client = client

    @app.get("/robots.txt", response_class=PlainTextResponse)
    def robots() -> str:
        return f"User-agent: *\nAllow: /\n\nSitemap: {SITE_URL}/sitemap.xml"

    @app.get("/sitemap.xml")
    def sitemap() -> Response:
        body = (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
            "  <url>\n"
            f"    <loc>{SITE_URL}/</loc>\n"
            f"    <lastmod>{SITEMAP_LASTMOD}</lastmod>\n"
            "    <changefreq>monthly</changefreq>\n"
            "    <priority>1.0</priority>\n"
            "  </url>\n"
            "</urlset>"
        )
        return Response(content=body, media_type="application/xml")

    @app.get("/api/countries")
    def list_countries() -> list[dict]:
        countries, warnings = client.get_countries()
        for message in warnings:
            logger.info(message)
        return countries

    @app.get("/api/life-expectancy/{country_code}")
    def life_expectancy(country_code: str) -> dict:
        value, warnings = client.get_life_expectancy(country_code)
        for message in warnings:
            logger.info(message)
        return {"country_code": country_code.upper(), "life_expectancy": value}

    @app.post("/api/life-data", status_code=status.HTTP_201_CREATED, response_model=None)
    def save_life_data(payload: dict = Body(...)) -> dict | JSONResponse:
        try:
            data = LifeDataCreate.model_validate(payload)
        except ValidationError as e:
            logger.warning("Rejected life data: %s", e.errors())
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content={
                    "message": "Invalid data provided",
                    "errors": e.errors(include_url=False, include_context=False, include_input=False),
                },
            )

        record = store.save_life_data(data)
        logger.info("Saved life data %s for %s", record.id, record.country_code)
        return {"message": "Life data saved successfully", "data": _serialize(record)}

    @app.get("/api/life-data/{life_data_id}")
    def get_life_data(life_data_id: str) -> dict:
        try:
            record_id = int(life_data_id)
        except ValueError:
            record_id = None
        if record_id is None or not 0 <= record_id <= MAX_RECORD_ID:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid ID provided"
            )

        record = store.get_life_data(record_id)
        if record is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Life data not found"
            )
        return _serialize(record)

    return app
