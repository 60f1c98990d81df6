"""
Client state controller.

Holds the track lists, current selection, tag form, search filter and BPM
tapper as plain mutable state. Derived values (filtered lists, disabled flags)
are recomputed on demand. All server interaction goes through TaggerApiClient.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from loguru import logger

from music_tagger.domain.library.models import Root, TagSet, TrackRecord

from .api import ApiError, TaggerApiClient
from .tapper import BpmTapper

IDLE_TEXT = "Select a track to play"


@dataclass
class TagForm:
    """Editable tag fields bound to the form."""

    title: str = ""
    artist: str = ""
    bpm: Optional[Union[int, float]] = None
    structure: str = ""
    quadre: str = ""
    genres: list[str] = field(default_factory=list)

    def clear(self) -> None:
        self.title = ""
        self.artist = ""
        self.bpm = None
        self.structure = ""
        self.quadre = ""
        self.genres = []

    def load(self, tags: TagSet) -> None:
        self.title = tags.title or ""
        self.artist = tags.artist or ""
        self.bpm = tags.bpm
        self.structure = tags.structure or ""
        self.quadre = tags.quadre or ""
        self.genres = list(tags.genres or [])

    def to_tag_set(self) -> TagSet:
        return TagSet(
            title=self.title,
            artist=self.artist,
            genres=sorted(set(self.genres)),
            bpm=self.bpm,
            structure=self.structure,
            quadre=self.quadre,
        )


def _sort_newest_first(files: list[TrackRecord]) -> None:
    files.sort(key=lambda f: f.mtime, reverse=True)


class ClientState:
    """Selection, form and list state for one tagging session."""

    def __init__(self, api: TaggerApiClient, tapper: Optional[BpmTapper] = None):
        self.api = api
        self.tapper = tapper or BpmTapper()

        self.input_files: list[TrackRecord] = []
        self.output_files: list[TrackRecord] = []
        self.search_term = ""
        self.current_track: Optional[TrackRecord] = None
        self.current_root: Optional[Root] = None
        self.tags = TagForm()
        self.is_loading = False
        self.is_saving = False
        self.status_text = IDLE_TEXT
        self.track_errors: list[str] = []

    # ---------------------- derived values ----------------------

    def _filter(self, files: list[TrackRecord]) -> list[TrackRecord]:
        if not self.search_term:
            return files
        needle = self.search_term.lower()
        return [f for f in files if needle in f.path.lower()]

    def filtered_input_files(self) -> list[TrackRecord]:
        return self._filter(self.input_files)

    def filtered_output_files(self) -> list[TrackRecord]:
        return self._filter(self.output_files)

    def is_form_disabled(self) -> bool:
        return self.current_track is None or self.is_loading

    def is_save_disabled(self) -> bool:
        return self.current_track is None or self.is_loading or self.is_saving

    # ---------------------- helpers ----------------------

    def _files_for(self, root: Root) -> list[TrackRecord]:
        return self.input_files if Root(root) == Root.INPUT else self.output_files

    def _remove_from(self, root: Root, path: str) -> None:
        files = [f for f in self._files_for(root) if f.path != path]
        if Root(root) == Root.INPUT:
            self.input_files = files
        else:
            self.output_files = files

    def _clear_form(self) -> None:
        self.tags.clear()
        self.tapper.reset()

    def _clear_selection(self, status_text: str = IDLE_TEXT) -> None:
        self.current_track = None
        self.current_root = None
        self.status_text = status_text
        self._clear_form()

    def _is_current(self, path: str) -> bool:
        return self.current_track is not None and self.current_track.path == path

    # ---------------------- operations ----------------------

    def refresh(self) -> None:
        """Reload both file lists from the server."""
        try:
            self.input_files, self.output_files = self.api.list_files()
        except ApiError as e:
            logger.error(f"Error fetching files: {e}")
            self.status_text = "Error loading files."

    def select_track(self, track: TrackRecord, root: Root) -> None:
        """Select a track and load its tags into the form."""
        if self._is_current(track.path) and self.current_root == Root(root):
            return

        self.current_track = track
        self.current_root = Root(root)
        self.status_text = f"Now Playing: {track.path}"
        self.track_errors = [p for p in self.track_errors if p != track.path]
        self._load_tags()

    def _load_tags(self) -> None:
        if self.current_track is None:
            return
        self.is_loading = True
        self._clear_form()
        try:
            self.tags.load(
                self.api.get_tags(self.current_root.value, self.current_track.path)
            )
        except ApiError as e:
            logger.error(f"Error fetching tags: {e}")
            self.status_text = f"Error loading tags for {self.current_track.path}"
            self._clear_form()
        finally:
            self.is_loading = False

    def report_playback_error(self) -> None:
        """Mark the current track as unplayable."""
        if self.current_track is None:
            return
        self.status_text = f"Error: Could not play {self.current_track.path}"
        self.track_errors.append(self.current_track.path)

    def toggle_genre(self, genre: str) -> None:
        if self.is_form_disabled():
            return
        if genre in self.tags.genres:
            self.tags.genres.remove(genre)
        else:
            self.tags.genres.append(genre)

    def tap_bpm(self, now_ms: Optional[float] = None) -> Optional[int]:
        """Register a BPM tap; the form BPM follows the tapper estimate."""
        bpm = self.tapper.tap(now_ms)
        if bpm is not None:
            self.tags.bpm = bpm
        return bpm

    def save(self) -> Optional[TrackRecord]:
        """Save the current track with the form tags.

        On failure the form stays as it is so the user can retry.

        Raises:
            ApiError: With the server-provided message
        """
        if self.is_save_disabled():
            return None
        self.is_saving = True
        try:
            new_file = self.api.save(
                self.current_root.value, self.current_track.path, self.tags.to_tag_set()
            )
        except ApiError as e:
            logger.error(f"Failed to save: {e}")
            self.status_text = f"Error saving file: {e}"
            raise
        finally:
            self.is_saving = False

        self._remove_from(self.current_root, self.current_track.path)
        # Re-saving an output track under the same name must not list it twice
        self._remove_from(Root.OUTPUT, new_file.path)
        self.output_files.append(new_file)
        _sort_newest_first(self.output_files)

        self._clear_selection("Saved successfully. Select a track to play.")
        return new_file

    def move_to_input(self, record: TrackRecord) -> TrackRecord:
        """Send an output track back to the input list.

        Raises:
            ApiError: With the server-provided message
        """
        try:
            new_file = self.api.move_to_input(record)
        except ApiError as e:
            logger.error(f"Failed to move file to input: {e}")
            self.status_text = f"Error moving file: {e}"
            raise

        self._remove_from(Root.OUTPUT, record.path)
        self._remove_from(Root.INPUT, new_file.path)
        self.input_files.append(new_file)
        _sort_newest_first(self.input_files)

        if self.current_root == Root.OUTPUT and self._is_current(record.path):
            self._clear_selection()
        return new_file

    def delete(self, record: TrackRecord, root: Root) -> None:
        """Permanently delete a track.

        Raises:
            ApiError: With the server-provided message
        """
        root = Root(root)
        try:
            self.api.delete(root.value, record.path)
        except ApiError as e:
            logger.error(f"Failed to delete file: {e}")
            self.status_text = f"Error deleting file: {e}"
            raise

        self._remove_from(root, record.path)
        if self.current_root == root and self._is_current(record.path):
            self._clear_selection()

    def step(self, offset: int) -> Optional[TrackRecord]:
        """Select the next (offset > 0) or previous track in the visible list."""
        if self.current_track is None:
            return None
        visible = (
            self.filtered_input_files()
            if self.current_root == Root.INPUT
            else self.filtered_output_files()
        )
        paths = [t.path for t in visible]
        if self.current_track.path not in paths:
            return None
        index = paths.index(self.current_track.path) + offset
        if 0 <= index < len(visible):
            self.select_track(visible[index], self.current_root)
            return visible[index]
        return None
