"""
Generate a bracket from a roster file and print its rounds.

Usage:
    python src/generate_bracket.py roster.yaml --format single_elimination
    python src/generate_bracket.py roster.yaml --format swiss --config swiss.yaml --output bracket.yaml

The roster is a YAML list of names, or of mappings with id/name/seed/rating.
"""
import argparse
import sys

import yaml

from brackets import BracketError, BYE, TournamentConfig, generate_bracket, load_config
from brackets.models import FORMATS


def load_players(file_path):
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file)
    if not data:
        return []
    if isinstance(data, dict):
        # name -> {seed: .., rating: ..} mapping
        return [dict(attributes or {}, name=name) for name, attributes in data.items()]
    return data


def print_rounds(bracket):
    for round_ in bracket.all_rounds():
        print(f"# {round_.name}")
        for match in bracket.round_matches(round_):
            player1 = match.player1 or 'TBD'
            player2 = match.player2 or 'TBD'
            line = f"{match.id}: {player1} vs {player2}"
            if match.result and match.result.is_bye:
                line += f" -> {match.result.winner_id} advances"
            elif match.notes and BYE not in match.players:
                line += f" ({match.notes})"
            print(line)
        if round_.byes:
            print(f"Bye: {', '.join(round_.byes)}")
        print()


def main(argv=None):
    parser = argparse.ArgumentParser(description='Generate a tournament bracket from a roster file.')
    parser.add_argument('roster', help='YAML file with the players')
    parser.add_argument('--format', required=True, choices=FORMATS, help='Competition format')
    parser.add_argument('--config', help='YAML file with tournament settings')
    parser.add_argument('--output', help='Write the generated bracket to this YAML file')
    args = parser.parse_args(argv)

    try:
        players = load_players(args.roster)
        config = load_config(args.config) if args.config else TournamentConfig()
        bracket = generate_bracket(args.format, players, config)
    except (OSError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except BracketError as e:
        print(f"Error: {e.kind}: {e.message}", file=sys.stderr)
        return 1

    print_rounds(bracket)
    print(f"Total matches: {bracket.total_matches}")

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            yaml.dump(bracket.to_dict(), f, default_flow_style=False, sort_keys=False)
        print(f"Bracket written to {args.output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
