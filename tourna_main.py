"""
Main application for the Tourna bracket engine.

Opens the tournament database, logs its state and writes the CSV reports.
The chat command layer builds the same managers around one DatabaseManager.
"""

import logging
import sys

from config.config_manager import ConfigManager
from database.database_manager import DatabaseManager
from database.errors import TournaError
from database.tournament_manager import TournamentManager
from database.player_manager import PlayerManager
from database.match_manager import MatchManager
from reports.report_generator import ReportGenerator

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def main(config_file: str = "config.yaml") -> int:
    """Main application entry point."""
    config = ConfigManager.load_config(config_file)
    configure_logging(config['logging'].get('level', 'INFO'))

    try:
        logger.info("Starting Tourna...")

        with DatabaseManager(config_file=config_file) as db_manager:
            tournament_manager = TournamentManager(db_manager)
            player_manager = PlayerManager(db_manager)
            match_manager = MatchManager(db_manager)
            report_generator = ReportGenerator(db_manager)

            stats = db_manager.get_database_stats()
            logger.info(f"Database statistics: {stats}")

            for tournament in tournament_manager.list_tournaments():
                active = player_manager.list_active(tournament.tournament_id)
                pending = [m for m in match_manager.list_matches(tournament.tournament_id) if not m.is_completed]
                logger.info(
                    f"Tournament {tournament.tournament_id} ({tournament.status}): "
                    f"{len(active)} active players, {len(pending)} pending matches"
                )

            output_dir = config['reports'].get('output_dir', 'reports')
            report_results = report_generator.generate_all_reports(output_dir)
            logger.info(f"Generated reports: {report_results}")

        logger.info("Tourna completed successfully")
        return 0

    except TournaError as e:
        logger.error(f"Error in Tourna: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else "config.yaml"))
