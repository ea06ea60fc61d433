from fastapi import FastAPI

from rental_fleet.entrypoints.http.exception_handlers import register_exception_handlers
from rental_fleet.entrypoints.http.routes.admin_cars import router as admin_cars_router
from rental_fleet.entrypoints.http.routes.cars import router as cars_router
from rental_fleet.entrypoints.http.routes.health import router as health_router
from rental_fleet.entrypoints.http.routes.homepage import router as homepage_router


def build_app() -> FastAPI:
    app = FastAPI(
        title="Rental Fleet API",
        description="""
        Car rental catalog: the public fleet and the admin back office.

        ## Features
        - Public fleet listing, categories, car detail by slug, related cars
        - Homepage featured car
        - Admin create / update / delete of cars with pricing, images,
          features and specifications

        ## Error Handling
        All errors return `{"detail", "code"}`; validation errors add `errors`.
        Store failures answer 502 with the translated store message.
        """,
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(cars_router, prefix="/v1")
    app.include_router(admin_cars_router, prefix="/v1")
    app.include_router(homepage_router, prefix="/v1")

    return app


app = build_app()
