# main.py

import structlog
from fastapi import FastAPI, Depends, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

import calculator
import crud
import models
import portions
import schemas
from config import get_settings
from database import SessionLocal, engine
from logging_config import setup_logging

settings = get_settings()
setup_logging(settings.LOG_LEVEL, json_logs=settings.APP_ENV != "dev", service=settings.APP_NAME)

# Create tables if they do not exist yet
models.Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.APP_NAME,
    description="API for computing Islamic inheritance (Fara'id) shares of an estate.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Database session dependency ---
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
# -----------------------------------

def _calculate(calculation_data: schemas.CalculationInput) -> schemas.CalculationResult:
    with structlog.contextvars.bound_contextvars(
        roster_size=len(calculation_data.heirs), estate_amount=calculation_data.estate_amount,
    ):
        return calculator.calculate_inheritance(calculation_data, currency_decimals=settings.CURRENCY_DECIMALS)

@app.get("/")
def read_root():
    return {"message": "Fara'id share calculator"}

@app.post("/heirs/", response_model=schemas.Heir)
def create_heir_endpoint(heir: schemas.HeirCreate, db: Session = Depends(get_db)):
    """
    Add an heir to the stored roster.
    """
    if crud.get_heir_by_name(db, name=heir.name):
        raise HTTPException(status_code=400, detail="An heir with this name already exists")
    return crud.create_heir(db=db, heir=heir)

@app.get("/heirs/", response_model=list[schemas.Heir])
def read_heirs(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud.get_heirs(db, skip=skip, limit=limit)

@app.put("/heirs/{heir_id}", response_model=schemas.Heir)
def update_heir_endpoint(heir_id: int, heir: schemas.HeirCreate, db: Session = Depends(get_db)):
    clash = crud.get_heir_by_name(db, name=heir.name)
    if clash and clash.id != heir_id:
        raise HTTPException(status_code=400, detail="An heir with this name already exists")
    db_heir = crud.update_heir(db, heir_id, heir)
    if db_heir is None:
        raise HTTPException(status_code=404, detail="Heir not found")
    return db_heir

@app.delete("/heirs/{heir_id}")
def delete_heir_endpoint(heir_id: int, db: Session = Depends(get_db)):
    if not crud.delete_heir(db, heir_id):
        raise HTTPException(status_code=404, detail="Heir not found")
    return {"deleted": heir_id}

@app.post("/calculate/", response_model=schemas.CalculationResult)
def run_calculation(calculation_data: schemas.CalculationInput):
    """
    Main endpoint: compute Fara'id shares for the roster in the request body.
    """
    return _calculate(calculation_data)

@app.get("/calculate/roster/", response_model=schemas.CalculationResult)
def run_roster_calculation(estate_amount: float = Query(ge=0, allow_inf_nan=False), db: Session = Depends(get_db)):
    """
    Compute shares for the stored roster against the given net estate.
    """
    calculation_data = schemas.CalculationInput(estate_amount=estate_amount, heirs=crud.roster_snapshot(db))
    return _calculate(calculation_data)

@app.post("/calculate/portions/", response_model=schemas.PortionResult)
def run_portion_calculation(portion_data: schemas.PortionInput):
    """Legacy split by stored portion weights."""
    return portions.calculate_by_portions(portion_data.estate_amount, portion_data.heirs)
