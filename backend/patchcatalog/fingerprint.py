import hashlib
import os


def calculate_checksum(patch_path: str) -> str:
    """
    MD5 of the file's parent directory path followed by the file's bytes.

    The directory is part of the identity, so two byte-identical patches
    shipped in different banks get different checksums.
    """
    with open(patch_path, 'rb') as f:
        content = f.read()
    directory_name = os.path.dirname(patch_path)
    return hashlib.md5(directory_name.encode('utf-8') + content).hexdigest()
