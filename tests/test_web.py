"""Tests for the web application routes."""

import io
from unittest.mock import MagicMock

from services.theme_generator import GeminiThemeGenerator, GroupTheme, ThemeSuccess


def page(response):
    return response.get_data(as_text=True)


def test_root_redirects_to_list_tab(client):
    response = client.get("/")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/participants/")


def test_every_tab_renders(client):
    for url in ("/participants/", "/raffle/", "/grouping/"):
        response = client.get(url)
        assert response.status_code == 200, url
        assert "HR 萬能抽籤分組" in page(response)


def test_empty_pool_shows_empty_state(client):
    for url in ("/raffle/", "/grouping/"):
        assert "名單目前為空" in page(client.get(url)), url


def test_security_headers(client):
    response = client.get("/participants/")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "Content-Security-Policy" in response.headers
    assert "X-Response-Time" in response.headers


def test_health(client, state):
    state.save_text("A\nB")
    data = client.get("/health").get_json()
    assert data["status"] == "ok"
    assert data["participants"] == 2
    assert data["raffle_state"] == "idle"


def test_metrics_endpoint(client):
    client.get("/participants/")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert b"http_request_latency_seconds" in response.data


def test_unknown_page_is_404(client):
    assert client.get("/no-such-page").status_code == 404


class TestParticipantRoutes:
    def test_save_list(self, client, state):
        response = client.post("/participants/save", data={"names": "王小明\n李大華\n\n"}, follow_redirects=True)

        assert response.status_code == 200
        assert "已儲存！共 2 人" in page(response)
        assert [p.name for p in state.participants] == ["王小明", "李大華"]

    def test_upload_fills_draft(self, client, state):
        data = {"file": (io.BytesIO("name\nAlice\nBob\nBob\n".encode("utf-8")), "list.csv")}
        response = client.post("/participants/upload", data=data, content_type="multipart/form-data",
                               follow_redirects=True)

        assert "已讀取 3 個姓名" in page(response)
        assert state.draft_text == "Alice\nBob\nBob"
        assert state.participants == ()

    def test_upload_rejects_wrong_extension(self, client, state):
        data = {"file": (io.BytesIO(b"Alice\n"), "list.xlsx")}
        response = client.post("/participants/upload", data=data, content_type="multipart/form-data",
                               follow_redirects=True)

        assert "請上傳 CSV 或 TXT 檔案" in page(response)
        assert state.draft_text == ""

    def test_upload_without_file(self, client):
        response = client.post("/participants/upload", data={}, follow_redirects=True)
        assert "請選擇要上傳的 CSV 檔案" in page(response)

    def test_duplicates_are_flagged_and_removed(self, client, state):
        state.save_text("Alice\nBob\nBob")
        assert "移除重複" in page(client.get("/participants/"))

        response = client.post("/participants/dedupe", follow_redirects=True)

        assert "已移除 1 筆重複姓名" in page(response)
        assert [p.name for p in state.participants] == ["Alice", "Bob"]

    def test_load_sample(self, client, state):
        client.post("/participants/sample")
        assert len(state.draft_text.splitlines()) == 15


class TestRaffleRoutes:
    def test_spin_and_poll(self, client, state):
        state.save_text("X\nY")

        response = client.post("/raffle/spin", json={"prize_name": "頭獎", "allow_duplicates": False})
        assert response.status_code == 200
        assert response.get_json()["ok"] is True

        assert state.raffle.wait(timeout=2)
        snapshot = client.get("/raffle/state").get_json()
        assert snapshot["state"] == "revealed"
        assert snapshot["winner"]["name"] in {"X", "Y"}
        assert snapshot["winner"]["prize_name"] == "頭獎"
        assert snapshot["remaining"] == 1

    def test_exhausted_pool_is_refused(self, client, state):
        state.save_text("X")
        client.post("/raffle/spin", json={})
        assert state.raffle.wait(timeout=2)

        response = client.post("/raffle/spin", json={})

        assert response.status_code == 409
        body = response.get_json()
        assert body["ok"] is False
        assert body["message"] == "沒有可抽籤的人選了！"
        assert len(body["state"]["history"]) == 1

    def test_spin_while_spinning_is_refused(self, client, state):
        state.raffle.tick_interval = 5
        state.save_text("X\nY")
        assert client.post("/raffle/spin", json={}).status_code == 200

        response = client.post("/raffle/spin", json={})

        assert response.status_code == 409
        assert response.get_json()["state"]["spinning"] is True

    def test_trigger_stays_disabled_while_spinning(self, client, state):
        state.raffle.tick_interval = 5
        state.save_text("X\nY")
        state.start_spin()

        text = page(client.get("/raffle/"))
        script = page(client.get("/static/js/raffle.js"))

        assert "fa-spinner fa-spin" in text
        assert "disabled" in text.split('id="spin-button"', 1)[1].split(">", 1)[0]
        assert "if (!spinning)" in script

    def test_form_post_is_accepted(self, client, state):
        state.save_text("X\nY")
        response = client.post("/raffle/spin", data={"prize_name": "", "allow_duplicates": "on"})

        assert response.status_code == 200
        assert state.raffle.wait(timeout=2)
        assert state.winners[0].prize_name == "特獎 💰"
        assert state.raffle_settings.allow_duplicates is True

    def test_page_shows_history(self, client, state):
        state.save_text("X")
        state.start_spin(prize_name="頭獎")
        assert state.raffle.wait(timeout=2)

        text = page(client.get("/raffle/"))

        assert "頭獎 得主" in text
        assert "X" in text


class TestGroupingRoutes:
    def test_generate_and_render(self, client, state):
        state.save_text("A\nB\nC\nD\nE")

        response = client.post("/grouping/generate", data={"group_count": "2"}, follow_redirects=True)

        assert "已分成 2 組" in page(response)
        assert sorted(g.size for g in state.groups) == [2, 3]
        assert "第 1 組" in page(response)

    def test_generate_with_themes(self, client, state, theme_generator):
        theme_generator.result = ThemeSuccess((GroupTheme("火箭隊", "衝衝衝"), GroupTheme("閃電隊", "快快快")))
        state.save_text("A\nB\nC\nD")

        response = client.post("/grouping/generate", data={"group_count": "2", "use_ai_themes": "1"},
                               follow_redirects=True)

        text = page(response)
        assert "火箭隊" in text
        assert "衝衝衝" in text

    def test_malformed_theme_reply_keeps_default_names(self, client, state):
        session = MagicMock()
        session.post.return_value.json.return_value = {"candidates": [{"content": {"parts": None}}]}
        state.grouping.theme_generator = GeminiThemeGenerator(api_key="test-key", session=session)
        state.save_text("A\nB\nC\nD")

        response = client.post("/grouping/generate", data={"group_count": "2", "use_ai_themes": "1"})

        assert response.status_code == 302
        assert session.post.called
        assert [g.name for g in state.groups] == ["第 1 組", "第 2 組"]

    def test_invalid_group_count(self, client, state):
        state.save_text("A\nB")
        response = client.post("/grouping/generate", data={"group_count": "5"}, follow_redirects=True)

        assert "組數需介於 2 到 2 之間" in page(response)
        assert state.groups == []

    def test_export_csv(self, client, state):
        state.save_text("A\nB\nC")
        state.generate_groups(2)

        response = client.get("/grouping/export")

        assert response.status_code == 200
        assert response.headers["Content-Type"] == "text/csv; charset=utf-8"
        assert "attachment" in response.headers["Content-Disposition"]
        body = response.get_data(as_text=True)
        assert body.startswith("\ufeff組名,組員姓名,組隊口號\n")
        assert body.count("\n") == 4

    def test_export_without_groups_redirects(self, client):
        response = client.get("/grouping/export", follow_redirects=True)
        assert "目前沒有分組結果可以下載" in page(response)
