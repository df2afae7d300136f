"""
Video processing utilities
"""
import logging
import cv2

logger = logging.getLogger(__name__)


def probe_duration(video_path: str) -> float:
    """
    Duration of a stored video in seconds.
    Returns 0 when the file cannot be read.
    """
    try:
        cap = cv2.VideoCapture(video_path)
        
        if not cap.isOpened():
            return 0.0
        
        fps = cap.get(cv2.CAP_PROP_FPS)
        frame_count = cap.get(cv2.CAP_PROP_FRAME_COUNT)
        cap.release()
        
        if fps <= 0 or frame_count <= 0:
            return 0.0
        return round(frame_count / fps, 2)
    except Exception:
        logger.warning("Could not probe duration of %s", video_path, exc_info=True)
        return 0.0
