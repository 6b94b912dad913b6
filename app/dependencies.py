from app.database import SessionLocal


# Yields one session per request; services receive it explicitly
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
