"""
Medications API Router
Endpoints for medication management
"""

from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user_id, services
from api.schemas.medication import (
    MedicationCreate,
    MedicationUpdate,
    MedicationResponse,
)


router = APIRouter(prefix="/medications", tags=["medications"])


@router.get("/", response_model=List[MedicationResponse])
async def list_medications(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Get all of the caller's medications, ordered by name
    """
    medication_service = services.get_medication_service()
    return await medication_service.get_user_medications(user_id, db=db)


@router.post("/", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
async def create_medication(
    medication_data: MedicationCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Add a new medication

    - **name**: Medication name
    - **dose**: Dose (e.g., "500mg")
    - **frequency**: Doses per day
    - **times**: "HH:MM" time slots
    - **start_date** / **end_date**: Inclusive active range
    - **category_id**: Optional category
    """
    medication_service = services.get_medication_service()
    return await medication_service.add_medication(
        user_id=user_id,
        name=medication_data.name,
        dose=medication_data.dose,
        frequency=medication_data.frequency,
        times=medication_data.times,
        start_date=medication_data.start_date,
        end_date=medication_data.end_date,
        category_id=medication_data.category_id,
        db=db
    )


@router.get("/{medication_id}", response_model=MedicationResponse)
async def get_medication(
    medication_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Get a medication
    """
    medication_service = services.get_medication_service()
    return await medication_service.get_medication(user_id, medication_id, db=db)


@router.put("/{medication_id}", response_model=MedicationResponse)
async def update_medication(
    medication_id: int,
    medication_data: MedicationUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Replace a medication's fields
    """
    medication_service = services.get_medication_service()
    return await medication_service.update_medication(
        user_id=user_id,
        medication_id=medication_id,
        name=medication_data.name,
        dose=medication_data.dose,
        frequency=medication_data.frequency,
        times=medication_data.times,
        start_date=medication_data.start_date,
        end_date=medication_data.end_date,
        category_id=medication_data.category_id,
        db=db
    )


@router.delete("/{medication_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_medication(
    medication_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Delete a medication and its dose logs
    """
    medication_service = services.get_medication_service()
    await medication_service.delete_medication(user_id, medication_id, db=db)
    return None
