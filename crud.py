# crud.py

from sqlalchemy.orm import Session
import models
import schemas

def get_heir(db: Session, heir_id: int):
    return db.query(models.Heir).filter(models.Heir.id == heir_id).first()

def get_heir_by_name(db: Session, name: str):
    """
    Look an heir up by name, so the roster never holds duplicates.
    """
    return db.query(models.Heir).filter(models.Heir.name == name).first()

def create_heir(db: Session, heir: schemas.HeirCreate):
    db_heir = models.Heir(
        name=heir.name,
        relationship=heir.relationship,
        gender=heir.gender,
        heir_group=heir.heir_group,
        portions=heir.portions,
    )
    db.add(db_heir)
    db.commit()
    db.refresh(db_heir)
    return db_heir

def get_heirs(db: Session, skip: int = 0, limit: int = 100):
    """
    List the roster ordered the way the ledger shows it: by group, then name.
    'skip' and 'limit' page through large rosters.
    """
    return (
        db.query(models.Heir)
        .order_by(models.Heir.heir_group, models.Heir.name)
        .offset(skip)
        .limit(limit)
        .all()
    )

def update_heir(db: Session, heir_id: int, heir: schemas.HeirCreate):
    """
    Replace an heir's stored fields. Returns None when the id is unknown.
    """
    db_heir = get_heir(db, heir_id)
    if db_heir is None:
        return None
    for field, value in heir.model_dump().items():
        setattr(db_heir, field, value)
    db.commit()
    db.refresh(db_heir)
    return db_heir

def delete_heir(db: Session, heir_id: int) -> bool:
    db_heir = get_heir(db, heir_id)
    if db_heir is None:
        return False
    db.delete(db_heir)
    db.commit()
    return True

def roster_snapshot(db: Session) -> list[schemas.HeirInput]:
    """
    Read the whole roster once and turn it into calculation input records.
    """
    rows = db.query(models.Heir).order_by(models.Heir.heir_group, models.Heir.name).all()
    return [schemas.HeirInput.model_validate(row, from_attributes=True) for row in rows]
