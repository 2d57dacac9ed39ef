"""Tests for event parsing and outbound message rendering."""
from models.events import Source, WebhookEvent, WebhookPayload
from models.message import MAX_TEXT_LENGTH, OutboundMessage


class TestSource:
    def test_user_target(self):
        source = Source.model_validate({"type": "user", "userId": "U1"})
        assert source.target_id == "U1"
        assert source.is_group is False

    def test_group_target_is_group_id(self):
        source = Source.model_validate({"type": "group", "groupId": "C1", "userId": "U1"})
        assert source.target_id == "C1"
        assert source.is_group is True

    def test_room_target_is_room_id(self):
        source = Source.model_validate({"type": "room", "roomId": "R1", "userId": "U1"})
        assert source.target_id == "R1"
        assert source.is_group is True


class TestWebhookPayload:
    def test_parses_line_delivery(self):
        payload = WebhookPayload.model_validate({
            "destination": "Ubot",
            "events": [
                {
                    "type": "message",
                    "mode": "active",
                    "timestamp": 1700000000000,
                    "webhookEventId": "01H",
                    "deliveryContext": {"isRedelivery": False},
                    "replyToken": "rt",
                    "source": {"type": "user", "userId": "U1"},
                    "message": {"id": "m1", "type": "image", "quoteToken": "q"},
                },
                {
                    "type": "memberJoined",
                    "timestamp": 1700000000001,
                    "replyToken": "rt2",
                    "source": {"type": "group", "groupId": "C1"},
                    "joined": {"members": [{"type": "user", "userId": "U2"}]},
                },
                {"type": "unfollow", "source": {"type": "user", "userId": "U3"}},
            ],
        })

        image, joined, unfollow = [WebhookEvent.model_validate(e) for e in payload.events]
        assert image.reply_token == "rt"
        assert image.webhook_event_id == "01H"
        assert image.message.type == "image"
        assert joined.joined.members[0].user_id == "U2"
        assert unfollow.type == "unfollow"

    def test_empty_delivery(self):
        payload = WebhookPayload.model_validate({"destination": "Ubot", "events": []})
        assert payload.events == []


class TestOutboundMessage:
    def test_plain_text(self):
        assert OutboundMessage.plain("hello").to_line() == {"type": "text", "text": "hello"}

    def test_mention(self):
        rendered = OutboundMessage.mention("U1", "Food Rating").to_line()
        assert rendered["type"] == "textV2"
        assert rendered["text"] == "{member}\nFood Rating"
        assert rendered["substitution"]["member"] == {
            "type": "mention",
            "mentionee": {"type": "user", "userId": "U1"},
        }

    def test_mention_escapes_literal_braces(self):
        rendered = OutboundMessage.mention("U1", "use {curly} braces").to_line()
        assert rendered["text"] == "{member}\nuse {{curly}} braces"

    def test_long_text_is_truncated(self):
        rendered = OutboundMessage.plain("x" * (MAX_TEXT_LENGTH + 100)).to_line()
        assert len(rendered["text"]) == MAX_TEXT_LENGTH
        assert rendered["text"].endswith("…")

    def test_long_mention_is_truncated(self):
        rendered = OutboundMessage.mention("U1", "x" * (MAX_TEXT_LENGTH + 100)).to_line()
        assert len(rendered["text"]) == MAX_TEXT_LENGTH

    def test_long_mention_with_braces_stays_within_limit(self):
        rendered = OutboundMessage.mention("U1", "{}" * 3000).to_line()
        assert len(rendered["text"]) <= MAX_TEXT_LENGTH

        body = rendered["text"][len("{member}\n"):]
        assert body.endswith("…")
        # no brace pair is split by the truncation
        assert body.count("{") % 2 == 0
        assert body.count("}") % 2 == 0
