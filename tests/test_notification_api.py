"""Tests for in-app notifications."""

from coursestack_app.modules.notification.services import NotificationService


class TestNotifications:

    def test_list_and_mark_read(self, client, login_client, user_factory):
        user = user_factory('reader')
        first = NotificationService.create_notification(user.user_id, 'One', 'first')
        NotificationService.create_notification(user.user_id, 'Two', 'second')
        login_client(client, user)

        data = client.get('/api/notifications').get_json()
        assert data['unread_count'] == 2
        assert len(data['notifications']) == 2

        assert client.post(f'/api/notifications/{first.id}/read').status_code == 200
        assert client.get('/api/notifications').get_json()['unread_count'] == 1

        assert client.post('/api/notifications/read-all').get_json()['updated'] == 1
        assert client.get('/api/notifications').get_json()['unread_count'] == 0

    def test_cannot_read_someone_elses(self, client, login_client, user_factory):
        owner = user_factory('owner')
        notification = NotificationService.create_notification(owner.user_id, 'Private', 'hi')
        login_client(client, user_factory('snoop'))

        assert client.post(f'/api/notifications/{notification.id}/read').status_code == 404
