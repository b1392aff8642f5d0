# export.py - save the visible canvas as a numbered text file
# - <dir>/1.txt, 2.txt, ... ; the directory is created on first use
# - the text is the literal ANSI stream shown on screen
# - any OSError is logged and reported as False, never retried
# - a file that could not be written completely is removed again
import logging
import os
from typing import Optional

logger = logging.getLogger(__name__)

EXPORT_DIR = os.getenv('PAINT_EXPORT_DIR', 'images')


def next_path(directory:str) -> str:
    taken = [int(name[:-4]) for name in os.listdir(directory)
             if name.endswith('.txt') and name[:-4].isdigit()]
    return os.path.join(directory, f"{max(taken, default=0) + 1}.txt")


def save_image(img:str, directory:Optional[str]=None) -> bool:
    directory = directory or EXPORT_DIR
    created = None
    try:
        os.makedirs(directory, exist_ok=True)
        path = next_path(directory)
        with open(path, 'x', encoding='utf-8') as f:
            created = path
            f.write(img)
    except OSError as e:
        logger.warning("export to %s failed: %s", directory, e)
        if created is not None:
            try: os.remove(created)
            except OSError as e: logger.warning("could not remove partial export %s: %s", created, e)
        return False
    logger.info("exported canvas to %s", path)
    return True
