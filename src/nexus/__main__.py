from pathlib import Path
import sys

from dotenv import load_dotenv

# Ensure the src directory is on sys.path when running as a script
_SRC_DIR = Path(__file__).resolve().parents[1]
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from nexus.bootstrap import configure_logging, create_game_service
from nexus.presentation.cli import main_menu


def _print_help_surface() -> None:
    print("\nHelp:")
    print("- Pick options by number at each prompt; 0 backs out or quits.")
    print("- Saves: set NEXUS_SAVE_DIR or NEXUS_DATABASE_URL, or NEXUS_DISABLE_SQL=1 for JSON files only.")
    print("- Reproducible runs: set NEXUS_SEED to an integer.")


def main() -> None:
    load_dotenv()
    configure_logging()
    try:
        game_service = create_game_service()
        main_menu(game_service)
    except KeyboardInterrupt:
        print("\nSession ended.")
    except Exception as exc:
        print("An unexpected error occurred. The game closed safely.")
        print(f"Reason: {exc}")
        _print_help_surface()


if __name__ == "__main__":
    main()
