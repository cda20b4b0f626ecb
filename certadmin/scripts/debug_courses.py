"""Lists every `courses` document, showing both the document id and the `id` field."""
import logging
import sys

from certadmin.models.course_model import COLLECTION
from certadmin.scripts._env import ENV_LOCAL_PATH, MissingServiceAccountError, connect

logger = logging.getLogger(__name__)

HEADER = "--- LISTADO DE CURSOS EN FIRESTORE ---"
FOOTER = "--------------------------------------"


def print_courses(db, out=None) -> None:
    out = out or sys.stdout
    print(HEADER, file=out)
    snapshots = list(db.collection(COLLECTION).stream())
    print(f"Total cursos: {len(snapshots)}", file=out)
    for snapshot in snapshots:
        data = snapshot.to_dict() or {}
        # A mismatch between DocID and FieldID breaks certificate -> course lookups
        print(f'DocID: "{snapshot.id}" | FieldID: "{data.get("id")}" | Name: "{data.get("name")}"', file=out)
    print(FOOTER, file=out)


def main(env_path: str = ENV_LOCAL_PATH, db=None) -> int:
    if db is None:
        try:
            db = connect(env_path)
        except (MissingServiceAccountError, ValueError) as e:
            print(str(e), file=sys.stderr)
            return 1

    try:
        print_courses(db)
    except Exception as e:
        logger.error(f"Error reading courses: {e}", exc_info=True)
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
