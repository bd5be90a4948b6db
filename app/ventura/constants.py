MAX_UPLOAD_BYTES = 100 * 1024 * 1024   # 100 MB (pitch videos are the largest input)
MAX_REQUEST_BYTES = 150 * 1024 * 1024  # 150 MB (video + optional report)
CHUNK_SIZE = 1024 * 1024
MAX_ERROR_CHARS = 1200

BOARD_SIMULATION_DELAY_SECONDS = 2.0
COMMITTEE_MESSAGE_INTERVAL_SECONDS = 3.0

MIN_MESSAGES_FOR_PROGRESS_CHECK = 6
PROGRESS_CHECK_WINDOW = 8
PITCH_CONTEXT_CHARS = 1000
TO_BE_DETERMINED = "To be determined"
