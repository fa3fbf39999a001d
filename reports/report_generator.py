"""
Report generator for the Tourna system.
"""

import os
import logging
from typing import Dict, List

import pandas as pd

from database.database_manager import DatabaseManager
from database.match_manager import MatchManager
from database.player_manager import PlayerManager
from models.match import Match

logger = logging.getLogger(__name__)


class ReportGenerator:
    """Generates CSV reports of tournaments, players and brackets."""

    def __init__(self, database_manager: DatabaseManager):
        self.db_manager = database_manager
        self.player_manager = PlayerManager(database_manager)
        self.match_manager = MatchManager(database_manager)

    def generate_tournaments_report(self, output_file: str) -> int:
        """
        Generate an overview of all tournaments, newest first.
        Returns the number of tournaments in the report.
        """
        tournaments = self.db_manager.list_tournaments()
        if not tournaments:
            logger.warning("No tournaments found for report generation")
            return 0

        data = []
        for tournament in tournaments:
            matches = self.match_manager.list_matches(tournament.tournament_id)
            data.append({
                'Tournament ID': tournament.tournament_id,
                'Name': tournament.name,
                'Status': tournament.status,
                'Created': tournament.created_at.isoformat() if tournament.created_at else '',
                'Players': self.db_manager.count_players(tournament.tournament_id),
                'Matches': len(matches),
                'Completed Matches': sum(1 for m in matches if m.is_completed),
            })

        df = pd.DataFrame(data)
        df.to_csv(output_file, index=False, encoding='utf-8')

        logger.info(f"Generated tournaments report with {len(tournaments)} tournaments: {output_file}")
        return len(tournaments)

    def generate_player_report(self, tournament_id: str, output_file: str) -> int:
        """
        Generate the player standings of one tournament.
        Returns the number of players in the report.
        """
        players = self.player_manager.list_for_tournament(tournament_id)
        if not players:
            logger.warning(f"No players found in tournament {tournament_id} for report generation")
            return 0

        wins: Dict[str, int] = {}
        losses: Dict[str, int] = {}
        for match in self.match_manager.list_matches(tournament_id):
            if match.winner_id is None:
                continue
            wins[match.winner_id] = wins.get(match.winner_id, 0) + 1
            if match.loser_id is not None:
                losses[match.loser_id] = losses.get(match.loser_id, 0) + 1

        data = []
        for player in players:
            data.append({
                'Seed': player.seed_number if player.seed_number is not None else '',
                'User ID': player.discord_user_id,
                'Username': player.discord_username,
                'Invite Link': player.invite_link,
                'Eliminated': 'yes' if player.is_eliminated else 'no',
                'Wins': wins.get(player.discord_user_id, 0),
                'Losses': losses.get(player.discord_user_id, 0),
            })

        df = pd.DataFrame(data)
        df.to_csv(output_file, index=False, encoding='utf-8')

        logger.info(f"Generated player report for {tournament_id} with {len(players)} players: {output_file}")
        return len(players)

    def generate_bracket_report(self, tournament_id: str, output_file: str) -> int:
        """
        Generate the list of matches of one tournament with their round results.
        Returns the number of matches in the report.
        """
        matches = self.match_manager.list_matches(tournament_id)
        if not matches:
            logger.warning(f"No matches found in tournament {tournament_id} for report generation")
            return 0

        names = {
            player.discord_user_id: player.discord_username
            for player in self.player_manager.list_for_tournament(tournament_id)
        }

        data = [self._create_match_row(match, names) for match in matches]
        df = pd.DataFrame(data)
        df.to_csv(output_file, index=False, encoding='utf-8')

        logger.info(f"Generated bracket report for {tournament_id} with {len(matches)} matches: {output_file}")
        return len(matches)

    def _create_match_row(self, match: Match, names: Dict[str, str]) -> Dict[str, object]:
        rounds = self.match_manager.list_rounds(match.id)
        tally = self.match_manager.round_tally(match.id) or {}
        round_results: List[str] = [
            f"{r.round_number}:{names.get(r.winner_id, r.winner_id)}" for r in rounds
        ]
        return {
            'Match': match.match_number,
            'Match ID': match.id,
            'Player 1': names.get(match.player1_id, match.player1_id),
            'Player 2': names.get(match.player2_id, match.player2_id),
            'Score': f"{tally.get(match.player1_id, 0)}-{tally.get(match.player2_id, 0)}",
            'Rounds': ' '.join(round_results),
            'Winner': names.get(match.winner_id, match.winner_id) if match.winner_id else '',
            'Status': match.status,
        }

    def generate_all_reports(self, output_directory: str = "reports") -> Dict[str, int]:
        """Generate all available reports in the specified directory."""
        os.makedirs(output_directory, exist_ok=True)

        report_results = {}

        overview_report = os.path.join(output_directory, "tournaments_report.csv")
        report_results['tournaments'] = self.generate_tournaments_report(overview_report)

        used_ids = set()
        for index, tournament in enumerate(self.db_manager.list_tournaments(), start=1):
            safe_id = "".join(c for c in tournament.tournament_id if c.isalnum() or c in ('-', '_'))
            safe_id = safe_id or f"tournament_{index}"
            while safe_id in used_ids:
                safe_id = f"{safe_id}_{index}"
            used_ids.add(safe_id)

            players_report = os.path.join(output_directory, f"{safe_id}_players_report.csv")
            report_results[f'{safe_id}_players'] = self.generate_player_report(
                tournament.tournament_id, players_report
            )

            bracket_report = os.path.join(output_directory, f"{safe_id}_bracket_report.csv")
            report_results[f'{safe_id}_bracket'] = self.generate_bracket_report(
                tournament.tournament_id, bracket_report
            )

        logger.info(f"Generated all reports in directory: {output_directory}")
        return report_results
