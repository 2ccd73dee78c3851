"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from employee_api.config import settings
from employee_api.database import SessionLocal, get_db, init_db, seed_genders
from employee_api.errors import register_exception_handlers
from employee_api.fixtures import load_fixtures
from employee_api.models import Employee
from employee_api.repository import EmployeeRepository
from employee_api.schemas import (
    CreatedResponse,
    EmployeeListResponse,
    EmployeePayload,
    EmployeeResponse,
    GenderResponse,
    HealthResponse,
    LoginRequest,
    MessageResponse,
    TokenResponse,
)
from employee_api.security import authenticate, create_access_token, get_current_employee
from employee_api.services import EmployeeService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("employee_api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database and seed data on startup."""
    init_db()
    db = SessionLocal()
    try:
        seed_genders(db)
        if settings.SEED_FIXTURES:
            load_fixtures(db)
    finally:
        db.close()
    logger.info("Employee API %s started", settings.APP_VERSION)
    yield


app = FastAPI(
    title="Employee Records API",
    description=(
        "Manage employee records: bearer-token login, create, edit, fetch and "
        "search employees with PESEL checksum validation."
    ),
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


def get_employee_service(db: Session = Depends(get_db)) -> EmployeeService:
    return EmployeeService(EmployeeRepository(db))


EMPLOYEE_BODY = {
    "requestBody": {
        "required": True,
        "content": {"application/json": {"schema": EmployeePayload.model_json_schema()}},
    }
}


# --- Health Check ---

@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="Health Check",
    description="Check if the API is running and healthy.",
)
async def health_check():
    return HealthResponse(
        status="healthy",
        version=settings.APP_VERSION,
        timestamp=datetime.now(UTC),
    )


# --- Auth ---

@app.post(
    "/api/login",
    response_model=TokenResponse,
    tags=["Auth"],
    summary="Log In",
    description="Exchange an employee's email and password for a bearer token.",
    responses={401: {"model": MessageResponse, "description": "Invalid credentials"}},
)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    employee = authenticate(db, credentials.email, credentials.password)
    return TokenResponse(token=create_access_token(employee))


# --- Employee Endpoints ---

@app.get(
    "/api/employees",
    response_model=EmployeeListResponse,
    tags=["Employees"],
    summary="List Employees",
    description=(
        "Get a paginated list of employees. Filters are exact matches; "
        "orderBy is a comma-separated list of fields, '-' prefix for descending "
        "(e.g. 'lastName,-firstName')."
    ),
    responses={400: {"description": "Unknown orderBy field"}},
)
def list_employees(
    first_name: Optional[str] = Query(None, alias="firstName", description="Filter by first name"),
    last_name: Optional[str] = Query(None, alias="lastName", description="Filter by last name"),
    email: Optional[str] = Query(None, description="Filter by email"),
    gender: Optional[str] = Query(None, description="Filter by gender name"),
    order_by: Optional[str] = Query(None, alias="orderBy", description="Sort fields"),
    page_size: Optional[str] = Query(None, alias="pageSize", description="Items per page"),
    current_page: Optional[str] = Query(None, alias="currentPage", description="Page number"),
    service: EmployeeService = Depends(get_employee_service),
    _: Employee = Depends(get_current_employee),
):
    page = service.list_employees(
        {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "gender": gender,
            "orderBy": order_by,
            "pageSize": page_size,
            "currentPage": current_page,
        }
    )
    return EmployeeListResponse(
        data=[EmployeeResponse.from_employee(emp) for emp in page.items],
        current_page=page.current_page,
        total_items=page.total,
        items_per_page=page.page_size,
    )


@app.post(
    "/api/employees",
    response_model=CreatedResponse,
    status_code=201,
    tags=["Employees"],
    summary="Create Employee",
    description="Create a new employee record.",
    responses={400: {"description": "Validation errors keyed by field"}},
    openapi_extra=EMPLOYEE_BODY,
)
def create_employee(
    payload: dict[str, Any] = Body(...),
    service: EmployeeService = Depends(get_employee_service),
    _: Employee = Depends(get_current_employee),
):
    employee = service.create(payload)
    return CreatedResponse(message="Employee created successfully", id=employee.id)


@app.get(
    "/api/employees/{employee_id}",
    response_model=EmployeeResponse,
    tags=["Employees"],
    summary="Get Employee",
    description="Get a single employee by ID.",
    responses={404: {"model": MessageResponse, "description": "Employee not found"}},
)
def get_employee(
    employee_id: int,
    service: EmployeeService = Depends(get_employee_service),
    _: Employee = Depends(get_current_employee),
):
    return EmployeeResponse.from_employee(service.get(employee_id))


@app.put(
    "/api/employees/{employee_id}",
    response_model=MessageResponse,
    tags=["Employees"],
    summary="Update Employee",
    description="Update an existing employee. Password fields are optional.",
    responses={
        400: {"description": "Validation errors keyed by field"},
        404: {"model": MessageResponse, "description": "Employee not found"},
    },
    openapi_extra=EMPLOYEE_BODY,
)
def update_employee(
    employee_id: int,
    payload: dict[str, Any] = Body(...),
    service: EmployeeService = Depends(get_employee_service),
    _: Employee = Depends(get_current_employee),
):
    service.edit(employee_id, payload)
    return MessageResponse(message="Employee updated successfully")


# --- Gender Endpoints ---

@app.get(
    "/api/genders",
    response_model=list[GenderResponse],
    tags=["Genders"],
    summary="List Genders",
    description="Get all genders with employee count.",
)
def list_genders(
    service: EmployeeService = Depends(get_employee_service),
    _: Employee = Depends(get_current_employee),
):
    return [GenderResponse.from_gender(gender, count) for gender, count in service.list_genders()]
