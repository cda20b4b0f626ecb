"""Prints a sample of `certificates` documents: holder name and the course id they point at."""
import logging
import sys

from certadmin.models.certificate_model import COLLECTION
from certadmin.scripts._env import ENV_LOCAL_PATH, MissingServiceAccountError, connect

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 10
HEADER = "--- MUESTRA DE CERTIFICADOS ---"
FOOTER = "-------------------------------"


def print_certificates(db, limit: int = SAMPLE_SIZE, out=None) -> None:
    out = out or sys.stdout
    print(HEADER, file=out)
    for snapshot in db.collection(COLLECTION).limit(limit).stream():
        data = snapshot.to_dict() or {}
        print(f'FullName: "{data.get("fullName")}" | CourseID (Cert): "{data.get("courseId")}"', file=out)
    print(FOOTER, file=out)


def main(env_path: str = ENV_LOCAL_PATH, db=None) -> int:
    if db is None:
        try:
            db = connect(env_path)
        except (MissingServiceAccountError, ValueError) as e:
            print(str(e), file=sys.stderr)
            return 1

    try:
        print_certificates(db)
    except Exception as e:
        logger.error(f"Error reading certificates: {e}", exc_info=True)
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
