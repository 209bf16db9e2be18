"""
Review Service - staging, category filtering and commit of AI detections.

Detected boxes are staged in the store's preview list. The full candidate
set is kept here so toggling a category off and on again never loses
boxes. Confirming merges the visible preview into the committed boxes as
one history step; cancelling discards it.
"""
import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from core.models import Box, Category, DetectedBox, PresetRecord, parse_category
from editor.store import BoxStore

logger = logging.getLogger(__name__)


def box_category(box: Box) -> Category:
    return box.category or Category.DEFAULT


class ReviewWorkflow:
    """Review/commit workflow for one store."""

    def __init__(self, store: BoxStore, presets=None):
        """
        Initialize workflow.

        Args:
            store: Store holding the preview and committed boxes
            presets: Optional preset service (list/create/delete)
        """
        self.store = store
        self.presets = presets
        self.all_candidates: List[Box] = []
        self.selected_categories: Dict[Category, bool] = OrderedDict()
        self._generation: Optional[int] = None

    @property
    def is_active(self) -> bool:
        """True while candidates are awaiting review."""
        if self._generation != self.store.generation:
            return False
        return bool(self.all_candidates)

    # ------------------------------------------------------------------
    # Staging and filtering
    # ------------------------------------------------------------------

    def stage(self, detections: Sequence[DetectedBox]) -> int:
        """
        Stage detections for review with every observed category selected.

        Args:
            detections: Categorized detections

        Returns:
            Number of staged boxes
        """
        self.all_candidates = [detection.to_box() for detection in detections]
        self.selected_categories = OrderedDict(
            (box_category(box), True) for box in self.all_candidates
        )
        self._generation = self.store.generation
        self.store.set_preview_boxes(self.all_candidates)
        logger.info(
            "Staged %d candidates in %d categories",
            len(self.all_candidates), len(self.selected_categories)
        )
        return len(self.all_candidates)

    def toggle_category(self, category, checked: bool):
        """Show or hide one category in the staged preview."""
        if not self.is_active:
            return
        category = parse_category(category)
        if category not in self.selected_categories:
            return
        self.selected_categories[category] = checked
        self._refresh_preview()

    def set_categories(self, categories: Sequence):
        """Select exactly ``categories`` among the observed ones."""
        if not self.is_active:
            return
        wanted = set()
        for value in categories:
            category = parse_category(value)
            if category is None:
                logger.debug("Ignoring unknown category %r", value)
                continue
            wanted.add(category)
        for category in self.selected_categories:
            self.selected_categories[category] = category in wanted
        self._refresh_preview()

    def visible_candidates(self) -> List[Box]:
        """Candidates whose category is currently selected."""
        return [
            box for box in self.all_candidates
            if self.selected_categories.get(box_category(box), False)
        ]

    def _refresh_preview(self):
        filtered = self.visible_candidates()
        current_ids = [box.id for box in self.store.preview_boxes]
        if current_ids != [box.id for box in filtered]:
            self.store.set_preview_boxes(filtered)

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def grouped(self) -> Dict[Category, List[Box]]:
        """All candidates grouped by category, categories sorted by name."""
        groups: Dict[Category, List[Box]] = {}
        for box in self.all_candidates:
            groups.setdefault(box_category(box), []).append(box)
        return OrderedDict(sorted(groups.items(), key=lambda item: item[0].value))

    @property
    def total_selected(self) -> int:
        return len(self.visible_candidates())

    @property
    def has_selection(self) -> bool:
        return any(self.selected_categories.values())

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def confirm(self) -> Dict[str, int]:
        """
        Commit the visible staged boxes as one history step.

        Returns:
            Accepted box count per category
        """
        if not self.is_active:
            self._clear()
            return {}

        self._refresh_preview()
        breakdown = {
            category.value: len(boxes)
            for category, boxes in self.grouped().items()
            if self.selected_categories.get(category)
        }
        committed = self.store.commit_preview_boxes()
        logger.info("Committed %d reviewed boxes", len(committed))
        self._clear()
        return breakdown

    def cancel(self):
        """Discard the staged boxes without touching history."""
        if self._generation == self.store.generation:
            self.store.clear_preview_boxes()
        self._clear()

    def _clear(self):
        self.all_candidates = []
        self.selected_categories = OrderedDict()
        self._generation = None

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    def load_presets(self) -> List[PresetRecord]:
        if self.presets is None:
            return []
        return self.presets.list_presets()

    def apply_preset(self, preset: PresetRecord):
        """Turn every observed category off, then the preset's categories on."""
        self.set_categories(preset.categories)

    def save_preset(self, name: str) -> Optional[PresetRecord]:
        """
        Save the currently selected categories under ``name``.

        Returns:
            The stored preset, or None if there is no preset service or
            the name is blank
        """
        if self.presets is None or not name.strip():
            return None
        categories = [
            category.value
            for category, selected in self.selected_categories.items()
            if selected
        ]
        return self.presets.create_preset(name.strip(), categories)

    def delete_preset(self, preset_id: str) -> bool:
        if self.presets is None:
            return False
        return self.presets.delete_preset(preset_id)
