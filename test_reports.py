#!/usr/bin/env python3
"""
Test suite for CSV report generation and the main entry point.
"""

import os
import unittest

import pandas as pd
import yaml

import tourna_main
from database.database_manager import DatabaseManager
from database.match_manager import MatchManager
from database.player_manager import PlayerManager
from database.tournament_manager import TournamentManager
from reports.report_generator import ReportGenerator
from test_database import StoreTestCase


class TestReportGenerator(StoreTestCase):
    """Test cases for ReportGenerator."""

    def setUp(self):
        super().setUp()
        self.tournaments = TournamentManager(self.db)
        self.players = PlayerManager(self.db)
        self.matches = MatchManager(self.db)
        self.generator = ReportGenerator(self.db)

        self.tournaments.create_tournament('spring-cup', 'Spring Cup')
        for user_id, name in (('u1', 'alice'), ('u2', 'bob'), ('u3', 'carol')):
            self.players.register('spring-cup', user_id, name, f'https://discord.gg/{name}')
        self.players.assign_seed('spring-cup', 'u1', 1)
        self.players.assign_seed('spring-cup', 'u2', 2)

        match = self.matches.create_match('spring-cup', 1, 'u1', 'u2')
        self.matches.record_round(match.id, 1, 'u1')
        self.matches.record_round(match.id, 2, 'u2')
        self.matches.record_round(match.id, 3, 'u1')
        self.matches.complete_match(match.id, 'u1')
        self.matches.create_match('spring-cup', 2, 'u1', 'u3')

    def test_player_report(self):
        output_file = os.path.join(self.test_dir, "players.csv")
        count = self.generator.generate_player_report('spring-cup', output_file)
        self.assertEqual(count, 3)

        df = pd.read_csv(output_file)
        self.assertEqual(list(df['Username']), ['carol', 'alice', 'bob'])
        self.assertEqual(list(df['Wins']), [0, 1, 0])
        self.assertEqual(list(df['Losses']), [0, 0, 1])
        self.assertEqual(list(df['Eliminated']), ['no', 'no', 'yes'])

    def test_bracket_report(self):
        output_file = os.path.join(self.test_dir, "bracket.csv")
        count = self.generator.generate_bracket_report('spring-cup', output_file)
        self.assertEqual(count, 2)

        df = pd.read_csv(output_file, keep_default_na=False)
        first = df.iloc[0]
        self.assertEqual(first['Player 1'], 'alice')
        self.assertEqual(first['Player 2'], 'bob')
        self.assertEqual(first['Score'], '2-1')
        self.assertEqual(first['Rounds'], '1:alice 2:bob 3:alice')
        self.assertEqual(first['Winner'], 'alice')
        self.assertEqual(first['Status'], 'completed')

        second = df.iloc[1]
        self.assertEqual(second['Winner'], '')
        self.assertEqual(second['Status'], 'pending')

    def test_tournaments_report(self):
        self.tournaments.create_tournament('summer-cup', 'Summer Cup')
        output_file = os.path.join(self.test_dir, "tournaments.csv")
        count = self.generator.generate_tournaments_report(output_file)
        self.assertEqual(count, 2)

        df = pd.read_csv(output_file)
        self.assertEqual(list(df['Tournament ID']), ['summer-cup', 'spring-cup'])
        self.assertEqual(list(df['Players']), [0, 3])
        self.assertEqual(list(df['Completed Matches']), [0, 1])

    def test_empty_tournament_reports(self):
        self.tournaments.create_tournament('empty', 'Empty Cup')
        output_file = os.path.join(self.test_dir, "empty.csv")
        self.assertEqual(self.generator.generate_player_report('empty', output_file), 0)
        self.assertEqual(self.generator.generate_bracket_report('empty', output_file), 0)
        self.assertFalse(os.path.exists(output_file))

    def test_generate_all_reports(self):
        output_dir = os.path.join(self.test_dir, "reports")
        results = self.generator.generate_all_reports(output_dir)

        self.assertEqual(results['tournaments'], 1)
        self.assertEqual(results['spring-cup_players'], 3)
        self.assertEqual(results['spring-cup_bracket'], 2)
        self.assertTrue(os.path.exists(os.path.join(output_dir, "spring-cup_bracket_report.csv")))

    def test_generate_all_reports_keeps_colliding_ids_apart(self):
        self.tournaments.create_tournament('cup.1', 'Dotted Cup')
        self.players.register('cup.1', 'u1', 'alice', 'link')
        self.tournaments.create_tournament('cup1', 'Plain Cup')
        self.players.register('cup1', 'u1', 'alice', 'link')
        self.players.register('cup1', 'u2', 'bob', 'link')

        output_dir = os.path.join(self.test_dir, "reports")
        results = self.generator.generate_all_reports(output_dir)

        player_results = {key: value for key, value in results.items()
                          if key.startswith('cup') and key.endswith('_players')}
        self.assertEqual(len(player_results), 2)
        self.assertEqual(sorted(player_results.values()), [1, 2])

        player_files = [name for name in os.listdir(output_dir)
                        if name.startswith('cup') and name.endswith('_players_report.csv')]
        self.assertEqual(len(player_files), 2)


class TestMain(StoreTestCase):
    """Test cases for the main entry point."""

    def test_main_writes_reports(self):
        TournamentManager(self.db).create_tournament('t1', 'Spring Cup')
        PlayerManager(self.db).register('t1', 'u1', 'alice', 'link')
        self.db.close()

        output_dir = os.path.join(self.test_dir, "out")
        self.test_config['reports'] = {'output_dir': output_dir}
        with open(self.test_config_path, 'w') as f:
            yaml.dump(self.test_config, f)

        self.assertEqual(tourna_main.main(self.test_config_path), 0)
        self.assertTrue(os.path.exists(os.path.join(output_dir, "tournaments_report.csv")))
        self.assertTrue(os.path.exists(os.path.join(output_dir, "t1_players_report.csv")))

        self.db = DatabaseManager(self.test_db_path, self.test_config_path)

    def test_main_reports_storage_failure(self):
        self.test_config['database']['path'] = os.path.join(self.test_dir, "missing_dir", "db.sqlite")
        with open(self.test_config_path, 'w') as f:
            yaml.dump(self.test_config, f)

        self.assertEqual(tourna_main.main(self.test_config_path), 1)


if __name__ == '__main__':
    unittest.main()
