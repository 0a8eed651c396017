"""Tests for the points ledger and leaderboard."""

from coursestack_app.modules.gamification.services import ScoreService


class TestScoreLedger:

    def test_award_points_updates_total_and_history(self, client, login_client, user_factory):
        user = user_factory('scorer')
        ScoreService.award_points(user.user_id, 15, 'Manual bonus', item_type=ScoreService.ITEM_TYPE_SYSTEM)
        ScoreService.award_points(user.user_id, 0, 'Nothing')
        login_client(client, user)

        data = client.get('/api/gamification/score').get_json()['data']

        assert data['total_score'] == 15
        assert data['history_total'] == 1
        assert data['history'][0]['score_change'] == 15

    def test_leaderboard_orders_by_score(self, client, login_client, user_factory):
        low = user_factory('low')
        high = user_factory('high')
        ScoreService.award_points(low.user_id, 5, 'bonus')
        ScoreService.award_points(high.user_id, 25, 'bonus')
        login_client(client, low)

        board = client.get('/api/gamification/leaderboard?limit=2').get_json()['data']

        assert [entry['username'] for entry in board] == ['high', 'low']
