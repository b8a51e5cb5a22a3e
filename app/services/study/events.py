"""Study data change hooks - upload, delete and reparse all purge derived views."""

from concurrent.futures import Future

from loguru import logger

from app.models.study import Study, StudyFile
from app.services.cache.jobs import CacheRemovalQueue
from app.services.cache.keys import removal_key_for_file, removal_key_for_study


class StudyEvents:
    """Translate study/file mutations into queued cache removals."""

    def __init__(self, removal_queue: CacheRemovalQueue):
        self._queue = removal_queue

    def on_file_changed(self, file: StudyFile) -> Future | None:
        """Call after a file is uploaded, replaced, deleted or reparsed."""
        removal_key = removal_key_for_file(file)
        if removal_key is None:
            logger.debug("No cached views depend on {} file {}", file.file_type, file.name)
            return None
        return self._queue.enqueue(removal_key)

    def on_study_changed(self, study: Study) -> Future | None:
        """Call after a study is deleted or fully reparsed."""
        return self._queue.enqueue(removal_key_for_study(study))
