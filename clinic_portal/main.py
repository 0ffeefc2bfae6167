import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clinic_portal.core import config
from clinic_portal.routes import booking_routes, schedule_routes

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)

app = FastAPI(title='Clinic Portal Booking API', debug=config.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.on_event('startup')
def check_configuration() -> None:
    config.validate_runtime_config()
    logger.info(
        'Clinic API at %s, clinic timezone %s (%s)',
        config.CLINIC_API_BASE_URL,
        config.CLINIC_TIMEZONE,
        config.APP_ENV,
    )


@app.get('/')
def root():
    return {'status': 'Clinic Portal Booking API Running'}


app.include_router(schedule_routes.router, prefix='/schedule')
app.include_router(booking_routes.router, prefix='/appointments')
