"""
Testing the API via TestClient
- Trick: temporarily replace generate_game_colors so the practice secret is predictable.
- Daily challenges need no patching: the date decides the puzzle.
"""

import base64
import json

import mastermind.main as app_main
from mastermind.challenge import daily_challenge, mint_token

PALETTE = ["red", "blue", "green", "yellow", "purple", "orange", "pink", "maroon"]
SECRET = ["red", "blue", "green", "yellow", "purple"]


def fake_generate_game_colors(rng=None, colors=None, use_network=False):
    return (list(SECRET), list(PALETTE))


def _wrong_guess(secret, palette):
    # A palette color missing from the secret, repeated 5 times
    filler = next(c for c in palette if c not in secret)
    return [filler] * 5


def test_practice_easy_game_flow(client, monkeypatch):
    monkeypatch.setattr(app_main, "generate_game_colors", fake_generate_game_colors)

    response = client.post("/games?mode=easy")
    assert response.status_code == 200
    new_game = response.json()
    assert new_game["kind"] == "practice"
    assert new_game["palette"] == PALETTE
    assert "secret" not in new_game
    game_id = new_game["game_id"]

    # Wrong length -> 422 from validation
    response = client.post(f"/games/{game_id}/guess", json={"guess": ["red", "blue"]})
    assert response.status_code == 422

    # Color not offered in this game -> 400
    response = client.post(f"/games/{game_id}/guess", json={"guess": ["red", "blue", "green", "yellow", "navy"]})
    assert response.status_code == 400

    response = client.post(
        f"/games/{game_id}/guess", json={"guess": ["red", "green", "blue", "yellow", "orange"]}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "playing"
    assert body["secret"] is None
    assert body["feedback"]["hints"] == ["exact", "color", "color", "exact", "none"]
    assert body["feedback"]["exact"] == 2
    assert body["feedback"]["color"] == 2

    response = client.post(f"/games/{game_id}/guess", json={"guess": SECRET})
    final = response.json()
    assert final["status"] == "won"
    assert final["secret"] == SECRET
    assert "No more guesses" in final["note"]

    state = client.get(f"/games/{game_id}").json()
    assert len(state["history"]) == 2
    assert state["secret"] == SECRET


def test_practice_hard_mode_hides_positions(client, monkeypatch):
    monkeypatch.setattr(app_main, "generate_game_colors", fake_generate_game_colors)
    game_id = client.post("/games?mode=hard").json()["game_id"]

    body = client.post(
        f"/games/{game_id}/guess", json={"guess": ["orange", "orange", "orange", "orange", "purple"]}
    ).json()
    assert body["feedback"]["hints"] == ["exact", "none", "none", "none", "none"]


def test_unknown_game_is_404(client):
    assert client.get("/games/does-not-exist").status_code == 404
    response = client.post("/games/does-not-exist/guess", json={"guess": SECRET})
    assert response.status_code == 404


def test_daily_token_and_session(client):
    daily = client.get("/daily?date=2025-01-15").json()
    assert daily["token"] == mint_token("2025-01-15")
    assert daily["path"] == f"/game/{daily['token']}/daily"

    response = client.post(f"/games/daily/{daily['token']}")
    assert response.status_code == 200
    game = response.json()
    code, palette = daily_challenge("2025-01-15")
    assert game["kind"] == "daily"
    assert game["mode"] == "hard"
    assert game["date"] == "2025-01-15"
    assert game["palette"] == palette

    body = client.post(f"/games/{game['game_id']}/guess", json={"guess": code}).json()
    assert body["status"] == "won"
    assert body["feedback"]["hints"] == ["exact"] * 5


def test_daily_rejects_bad_dates_and_tokens(client):
    assert client.get("/daily?date=15-01-2025").status_code == 400
    assert client.post("/games/daily/garbage").status_code == 400

    # A well-formed token whose code was swapped out
    token = mint_token("2025-01-15")
    payload = json.loads(base64.urlsafe_b64decode(token + "=" * (-len(token) % 4)))
    # Daily codes never repeat a color, so the reversed code is a different code
    payload["code"] = payload["code"][::-1]
    forged = base64.urlsafe_b64encode(json.dumps(payload).encode()).decode().rstrip("=")
    assert client.post(f"/games/daily/{forged}").status_code == 400

    # Self-consistent token for something that is not a date
    assert client.post(f"/games/daily/{mint_token('not-a-date')}").status_code == 400


def test_finished_daily_game_is_recorded_for_player(client):
    client.post("/profile", json={"telegramId": 555, "date": "2025-01-15", "firstName": "Ada"})

    token = mint_token("2025-01-15")
    code, palette = daily_challenge("2025-01-15")
    game_id = client.post(f"/games/daily/{token}?telegram_id=555").json()["game_id"]

    client.post(f"/games/{game_id}/guess", json={"guess": _wrong_guess(code, palette)})
    client.post(f"/games/{game_id}/guess", json={"guess": code})

    board = client.get("/leaderboard/2025-01-15?telegram_id=555").json()
    assert board["user_rank"]["rank"] == 1
    assert board["user_rank"]["attempts"] == 2
    assert board["leaderboard"][0]["user"]["first_name"] == "Ada"

    profile = client.post("/profile", json={"telegramId": 555, "date": "2025-01-15"}).json()
    assert profile["user"]["is_new_user"] is False
    assert profile["streaks"]["current_streak"] == 1
    assert profile["games"][0]["code"] == code


def test_daily_loss_without_profile_still_answers(client, monkeypatch):
    monkeypatch.setattr(app_main.config, "MAX_GUESSES", 1)
    code, palette = daily_challenge("2025-01-15")
    game_id = client.post(f"/games/daily/{mint_token('2025-01-15')}?telegram_id=999").json()["game_id"]

    body = client.post(f"/games/{game_id}/guess", json={"guess": _wrong_guess(code, palette)}).json()
    assert body["status"] == "lost"
    assert body["secret"] == code


def test_record_game_endpoint(client):
    completion = {
        "telegramId": "42",
        "attempts": 3,
        "isWon": True,
        "timeTaken": 75,
        "completedAt": "2025-01-15",
    }
    assert client.post("/game", json=completion).status_code == 404

    client.post("/profile", json={"telegramId": 42, "date": "2025-01-15"})
    response = client.post("/game", json=completion)
    assert response.status_code == 200
    assert response.json()["attempts"] == 3

    bad = dict(completion, completedAt="2025-13-40")
    assert client.post("/game", json=bad).status_code == 422


def test_share_only_for_won_games(client, monkeypatch):
    monkeypatch.setattr(app_main, "generate_game_colors", fake_generate_game_colors)
    game_id = client.post("/games").json()["game_id"]

    assert client.get(f"/games/{game_id}/share").status_code == 409

    client.post(f"/games/{game_id}/guess", json={"guess": SECRET})
    share = client.get(f"/games/{game_id}/share").json()
    assert "1 try" in share["text"]
    assert share["url"].startswith("https://t.me/share/url?text=")
