"""Tests for reading tags, saving and moving tracks back to input."""

from unittest.mock import patch

from mutagen.id3 import ID3

from music_tagger.core.errors import MetadataWriteError
from music_tagger.domain.library.metadata import write_tags
from music_tagger.domain.library.models import TagSet


def _save_body(**tags):
    return {"sourceDir": "input", "sourcePath": "raw.mp3", "tags": tags}


class TestGetTags:
    def test_untagged_file_returns_empty_form(self, client, config, make_audio):
        make_audio(config.input_dir / "raw.mp3")

        response = client.get("/api/tags/input/raw.mp3")

        assert response.status_code == 200
        assert response.json() == {
            "title": "",
            "artist": "",
            "genres": [],
            "bpm": None,
            "structure": "",
            "quadre": "",
        }

    def test_tagged_file(self, client, config, make_audio):
        path = make_audio(config.output_dir / "a b" / "song.mp3")
        write_tags(
            path,
            TagSet(
                title="Tuxedo Junction",
                artist="Erskine Hawkins",
                genres=["lindy hop"],
                bpm=136,
                structure="AABA",
                quadre="4",
            ),
        )

        data = client.get("/api/tags/output/a%20b/song.mp3").json()

        assert data["title"] == "Tuxedo Junction"
        assert data["genres"] == ["lindy hop"]
        assert data["bpm"] == 136
        assert (data["structure"], data["quadre"]) == ("AABA", "4")

    def test_missing_file_is_404(self, client):
        assert client.get("/api/tags/input/ghost.mp3").status_code == 404

    def test_traversal_is_403(self, client):
        assert client.get("/api/tags/input/..%2F..%2Fetc%2Fpasswd").status_code == 403


class TestSave:
    def test_save_from_input(self, client, config, make_audio):
        source = make_audio(config.input_dir / "raw.mp3")

        response = client.post(
            "/api/save",
            json=_save_body(
                title="Stompin' at the Savoy",
                artist="Chick Webb",
                genre=["Lindy Hop", "Techno"],
                bpm="150",
                structure="AABA",
                quadre="8",
            ),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "File saved successfully."
        assert data["newFile"]["path"] == "Chick Webb — Stompin' at the Savoy.mp3"
        assert data["newFile"]["mtime"]
        assert not source.exists()

        tags = ID3(str(config.output_dir / data["newFile"]["path"]))
        assert tags["TCON"].text == ["lindy hop"]
        assert tags["TBPM"].text == ["150"]
        assert tags.getall("COMM")[0].text == ["AABA|8"]

    def test_comma_separated_genre_string(self, client, config, make_audio):
        make_audio(config.input_dir / "raw.mp3")

        response = client.post(
            "/api/save", json=_save_body(title="T", genre="boogie woogie, lindy hop")
        )

        path = config.output_dir / response.json()["newFile"]["path"]
        assert ID3(str(path))["TCON"].text == ["boogie woogie, lindy hop"]

    def test_untitled_track_name(self, client, config, make_audio):
        make_audio(config.input_dir / "raw.mp3")
        response = client.post("/api/save", json=_save_body())
        assert response.json()["newFile"]["path"] == "Unknown Artist — Untitled.mp3"

    def test_resave_is_idempotent(self, client, config, make_audio):
        make_audio(config.input_dir / "raw.mp3")
        first = client.post("/api/save", json=_save_body(title="T", artist="A")).json()

        body = {
            "sourceDir": "output",
            "sourcePath": first["newFile"]["path"],
            "tags": {"title": "T", "artist": "A", "bpm": 99},
        }
        second = client.post("/api/save", json=body)

        assert second.status_code == 200
        assert second.json()["newFile"]["path"] == first["newFile"]["path"]
        assert [p.name for p in config.output_dir.iterdir()] == ["A — T.mp3"]

    def test_missing_fields_is_400(self, client):
        response = client.post("/api/save", json={"sourceDir": "input"})
        assert response.status_code == 400
        assert "error" in response.json()

    def test_empty_source_path_is_400(self, client):
        response = client.post(
            "/api/save", json={"sourceDir": "input", "sourcePath": "", "tags": {}}
        )
        assert response.status_code == 400

    def test_missing_source_is_404(self, client):
        response = client.post("/api/save", json=_save_body(title="x"))
        assert response.status_code == 404

    def test_traversal_is_403_without_mutation(self, client, config, make_audio):
        outside = make_audio(config.input_dir.parent / "outside.mp3")
        body = {"sourceDir": "input", "sourcePath": "../outside.mp3", "tags": {}}

        response = client.post("/api/save", json=body)

        assert response.status_code == 403
        assert outside.exists()
        assert list(config.output_dir.iterdir()) == []

    def test_tag_write_failure_is_500(self, client, config, make_audio):
        source = make_audio(config.input_dir / "raw.mp3")

        with patch(
            "music_tagger.domain.library.lifecycle.write_tags",
            side_effect=MetadataWriteError("Failed to write tags to raw.mp3: encoder"),
        ):
            response = client.post("/api/save", json=_save_body(title="x"))

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to write tags to raw.mp3: encoder"}
        assert source.exists()


class TestMoveToInput:
    def test_move_back(self, client, config, make_audio):
        source = make_audio(config.output_dir / "sub" / "song.mp3")

        response = client.post(
            "/api/move-to-input",
            json={"file": {"path": "sub/song.mp3", "mtime": "2024-01-01T00:00:00"}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "File moved back to input successfully."
        assert data["newFile"]["path"] == "song.mp3"
        assert (config.input_dir / "song.mp3").exists()
        assert not source.exists()

    def test_legacy_file_path_body(self, client, config, make_audio):
        make_audio(config.output_dir / "song.mp3")
        response = client.post("/api/move-to-input", json={"filePath": "song.mp3"})
        assert response.status_code == 200

    def test_missing_body_is_400(self, client):
        assert client.post("/api/move-to-input", json={}).status_code == 400

    def test_missing_file_is_404(self, client):
        response = client.post("/api/move-to-input", json={"file": {"path": "ghost.mp3"}})
        assert response.status_code == 404
