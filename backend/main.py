from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from dotenv import load_dotenv

load_dotenv()
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from database import init_db
from datetime import datetime
import os
import auth
import routers.inventory_items as inventory_items
import routers.rooster_breeds as rooster_breeds
import routers.roosters as roosters
import routers.sales_transactions as sales_transactions
import routers.suppliers as suppliers
import routers.reviews as reviews
import routers.public as public
import routers.notifications as notifications
import routers.dashboard as dashboard
import logging
from fastapi.openapi.utils import get_openapi
from utils.errors import INTERNAL_ERROR, ServiceError, resolve_error
from utils.responses import json_error, json_success


LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
os.makedirs(LOG_DIR, exist_ok=True) # Create the log directory if it doesn't exist

# Create a unique log file name based on current date/time
current_time_str = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
LOG_FILE = os.path.join(LOG_DIR, f"app_{current_time_str}.log")

# Configure the root logger
logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=LOG_FILE, # Log to a file
    filemode='a' # Append to the file if it exists
)

# Also log to the console
console_handler = logging.StreamHandler()
console_handler.setLevel(LOG_LEVEL)
console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
logging.getLogger().addHandler(console_handler) # Add to the root logger

logger = logging.getLogger(__name__)
logger.info("Application starting up...")
# --- End Logging Configuration ---


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(lifespan=lifespan)


allowed_origins_str = os.getenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000")

# Split the string into a list, stripping any whitespace
allowed_origins = [origin.strip() for origin in allowed_origins_str.split(',') if origin.strip()]

# Credentials are needed for the session cookie
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    status_code, code, message = resolve_error(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed with {exc.code}")
    return json_error(code, message, status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    message = "; ".join(problems) or "Invalid request."
    return json_error("INVALID_REQUEST", message, 400)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    codes = {404: "NOT_FOUND", 405: "METHOD_NOT_ALLOWED", 401: "UNAUTHENTICATED", 403: "FORBIDDEN"}
    return json_error(codes.get(exc.status_code, "INVALID_REQUEST"), str(exc.detail), exc.status_code)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    status_code, code, message = INTERNAL_ERROR
    return json_error(code, message, status_code)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Roostery Farm API",
        version="1.0.0",
        description="API for the Roostery farm: inventory, roosters, sales, suppliers and feedback",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "SessionCookie": {
            "type": "apiKey",
            "in": "cookie",
            "name": "__session",
        },
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        },
    }
    # Apply security globally to all endpoints
    openapi_schema["security"] = [{"SessionCookie": []}, {"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi


app.include_router(auth.router)
app.include_router(inventory_items.router)
# Breeds first: /roosters/breeds must win over /roosters/{rooster_id}
app.include_router(rooster_breeds.router)
app.include_router(roosters.router)
app.include_router(sales_transactions.router)
app.include_router(suppliers.router)
app.include_router(reviews.router)
app.include_router(public.router)
app.include_router(notifications.router)
app.include_router(dashboard.router)

@app.get("/")
async def test_route():
    return json_success({"message": "Welcome to the Roostery farm API!"})
