"""
JSON API over the bracket engine.

Tournaments are stored as YAML files under BRACKETS_DATA_DIR.
"""
import os

from flask import Flask, request, jsonify

from brackets import (
    BracketError, generate_bracket, submit_result, start_match, advance_swiss_round, compute_standings,
)
from brackets.store import BracketStore

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('BRACKETS_DATA_DIR', os.path.join(BASE_DIR, 'data'))

store = BracketStore(DATA_DIR)

# Error kinds mapped to HTTP status; anything else is a 400
ERROR_STATUS = {
    'MatchNotFound': 404,
    'TournamentNotFound': 404,
    'MatchAlreadyComplete': 409,
    'MatchNotReady': 409,
    'ConcurrentModification': 409,
    'RoundIncomplete': 409,
    'TournamentComplete': 409,
    'PairingExhausted': 409,
}


@app.errorhandler(BracketError)
def handle_bracket_error(error: BracketError):
    status = ERROR_STATUS.get(error.kind, 400)
    app.logger.info(f'{request.method} {request.path} rejected: {error.kind}: {error.message}')
    return jsonify(error.to_dict()), status


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _bracket_response(tournament_id, bracket, status=200):
    return jsonify({'id': tournament_id, 'bracket': bracket.to_dict()}), status


@app.route('/api/tournaments', methods=['GET'])
def api_list_tournaments():
    return jsonify({'tournaments': store.list_ids()})


@app.route('/api/tournaments', methods=['POST'])
def api_create_tournament():
    """Create a tournament from a roster: {format, players, config?, name?}."""
    data = _json_body()
    if not data.get('format'):
        return jsonify({'error': 'InvalidRequest', 'message': 'Missing format'}), 400
    if not isinstance(data.get('players'), list):
        return jsonify({'error': 'InvalidRequest', 'message': 'players must be a list'}), 400

    bracket = generate_bracket(data['format'], data['players'], data.get('config'))
    tournament_id = store.create(bracket, data.get('name') or 'tournament')
    app.logger.info(f'Created {bracket.format} tournament {tournament_id} with {len(bracket.players)} players')
    return _bracket_response(tournament_id, bracket, 201)


@app.route('/api/tournaments/<tournament_id>', methods=['GET'])
def api_get_tournament(tournament_id):
    return _bracket_response(tournament_id, store.load(tournament_id))


@app.route('/api/tournaments/<tournament_id>/matches/<match_id>/result', methods=['POST'])
def api_submit_result(tournament_id, match_id):
    """Submit score events for a match: {events, sport?, version?}."""
    data = _json_body()
    events = data.get('events')
    if not isinstance(events, list):
        return jsonify({'error': 'InvalidRequest', 'message': 'events must be a list'}), 400

    bracket = store.update(tournament_id, lambda b: submit_result(
        b, match_id, events, sport=data.get('sport'), expected_version=data.get('version')))
    return _bracket_response(tournament_id, bracket)


@app.route('/api/tournaments/<tournament_id>/matches/<match_id>/start', methods=['POST'])
def api_start_match(tournament_id, match_id):
    data = _json_body()
    bracket = store.update(tournament_id, lambda b: start_match(
        b, match_id, expected_version=data.get('version')))
    return _bracket_response(tournament_id, bracket)


@app.route('/api/tournaments/<tournament_id>/advance', methods=['POST'])
def api_advance_round(tournament_id):
    """Pair the next Swiss round."""
    data = _json_body()
    bracket = store.update(tournament_id, lambda b: advance_swiss_round(
        b, expected_version=data.get('version')))
    return _bracket_response(tournament_id, bracket)


@app.route('/api/tournaments/<tournament_id>/standings', methods=['GET'])
def api_standings(tournament_id):
    bracket = store.load(tournament_id)
    return jsonify({
        'id': tournament_id,
        'version': bracket.version,
        'standings': [s.to_dict() for s in compute_standings(bracket)],
    })


if __name__ == '__main__':
    app.run(debug=os.environ.get('FLASK_DEBUG') == '1')
