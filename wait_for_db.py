import os, time

from sqlalchemy import create_engine, text

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise SystemExit("DATABASE_URL is not set")

if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = "postgresql+psycopg2://" + DATABASE_URL[11:]

timeout_s = int(os.getenv("DB_WAIT_TIMEOUT", "60"))
start = time.time()
engine = create_engine(DATABASE_URL, pool_pre_ping=True)

print(f"[wait_for_db] Waiting for database at {engine.url.render_as_string(hide_password=True)} (timeout={timeout_s}s)")
while True:
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("[wait_for_db] Database is ready.")
        break
    except Exception as e:
        if time.time() - start > timeout_s:
            print(f"[wait_for_db] Timed out waiting for DB. Last error: {e}")
            raise
        time.sleep(1)
engine.dispose()
