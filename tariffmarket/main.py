from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from tariffmarket.core import settings, logger, load_market_config
from tariffmarket.core.broker_proxy import BrokerProxy, MQTTBrokerProxy
from tariffmarket.core.clock import TimeService, TimeslotPhaseRunner
from tariffmarket.core.discord_logger import send_discord_alert
from tariffmarket.database import SessionLocal, engine as default_engine, init_db
from tariffmarket.routers import api_router
from tariffmarket.services import build_tariff_market


api_description = """
Mercado de tarifas de la simulación.

Los brokers publican, expiran, revocan y actualizan tarifas; los clientes
se suscriben a las tarifas ofrecidas. Las tarifas nuevas se liberan solo
en las fronteras del intervalo de publicación del reloj de simulación.
"""


def create_app(broker_proxy: BrokerProxy | None = None, engine: Engine = default_engine) -> FastAPI:
    """
    Construye la API con una corrida de simulación completa. Sin proxy
    explícito se usa MQTT y se conecta al arrancar.
    """
    start_transport = broker_proxy is None
    proxy = broker_proxy if broker_proxy is not None else MQTTBrokerProxy()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # --- Arranque ---
        logger.info("🚀 Iniciando mercado de tarifas...")
        init_db(engine)
        db = SessionLocal(bind=engine)

        time_service = TimeService()
        phase_runner = TimeslotPhaseRunner(time_service)
        market = build_tariff_market(db, time_service, proxy, phase_runner, load_market_config(settings))

        app.state.market = market
        app.state.phase_runner = phase_runner
        if start_transport:
            proxy.start()

        yield

        # --- Cierre ---
        logger.info("🛑 Deteniendo mercado de tarifas...")
        if start_transport:
            proxy.stop()
        db.close()

    app = FastAPI(
        title="Tariff Market API",
        description=api_description,
        version="1.0.0",
        lifespan=lifespan,
    )
    app.include_router(api_router)

    @app.get("/", tags=["Root"])
    def read_root():
        return {"message": "Tariff Market v1"}

    # --- Manejo global de errores ---
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        message = f"Error 500 en {request.url.path}: {exc}"
        logger.error(message)
        send_discord_alert(message, level="CRITICAL")
        return JSONResponse(status_code=500, content={"detail": "Error interno del servidor."})

    return app


app = create_app()
