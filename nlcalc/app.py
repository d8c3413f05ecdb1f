import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from nlcalc.application import AGENT_NAME, VERSION, CalculatorService, configure_calculator_service, get_calculator_service
from nlcalc.core.logs import configure_logging
from nlcalc.routes import calc, history


def create_app(service: CalculatorService | None = None) -> FastAPI:
    if service is not None:
        configure_calculator_service(service)
    service = get_calculator_service()
    configure_logging(service.settings.log_level)

    app = FastAPI(title=f"{AGENT_NAME} API", version=VERSION)

    origins_env = os.getenv("API_CORS_ORIGINS", "")
    origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]
    if not origins:
        origins = ["http://localhost:3000", "http://127.0.0.1:3000"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(calc.router, prefix="/api")
    app.include_router(history.router, prefix="/api")

    output_dir = service.settings.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/plots", StaticFiles(directory=output_dir), name="plots")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": f"{AGENT_NAME} API",
                "docs": "/docs",
                "calculate": "/api/calculate",
                "plots": "/plots",
            }
        )

    return app
