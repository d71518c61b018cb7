"""Download and unpacking of the PARSEC track archive."""

import shutil
import tarfile
import tempfile
from pathlib import Path
from typing import Optional

import requests
from tqdm import tqdm

from ..config import ARCHIVE_BASE_URL, DOWNLOAD_CHUNK_SIZE, DOWNLOAD_TIMEOUT, METALLICITY
from ..errors import DownloadError, TrackIOError


def download_file(url: str, output_path: Path, verbose: bool = True) -> None:
    """
    Stream a file from ``url`` to ``output_path``.

    Raises:
        DownloadError: On connection failures and HTTP error statuses
        TrackIOError: If the file cannot be written
    """
    if verbose:
        print(f"\tDownloading from {url}")
    try:
        with requests.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT) as r:
            r.raise_for_status()
            total_size = int(r.headers.get("Content-Length", 0))
            with (
                open(output_path, "wb") as f,
                tqdm(
                    total=total_size,
                    unit="B",
                    unit_scale=True,
                    unit_divisor=1024,
                    desc=output_path.name,
                    disable=not verbose,
                ) as pbar,
            ):
                for chunk in r.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        pbar.update(len(chunk))
    except requests.RequestException as e:
        raise DownloadError(f"Could not download {url}: {e}") from e
    except OSError as e:
        raise TrackIOError(f"Could not write {output_path}: {e}") from e


def _unpacked_root(extract_dir: Path, metallicity: str) -> Path:
    # The archive normally holds a single top-level directory named after the metallicity
    candidate = extract_dir / metallicity
    if candidate.is_dir():
        return candidate
    entries = list(extract_dir.iterdir())
    if len(entries) == 1 and entries[0].is_dir():
        return entries[0]
    return extract_dir


def _extraction_options(tar: tarfile.TarFile, extract_dir: Path) -> dict:
    # Interpreters without extraction filters get the members checked here instead
    if hasattr(tarfile, "data_filter"):
        return {"filter": "data"}
    root = extract_dir.resolve()
    for member in tar.getmembers():
        destination = (extract_dir / member.name).resolve()
        if destination != root and root not in destination.parents:
            raise tarfile.ExtractError(f"Member {member.name!r} is outside the archive root")
        if member.issym() or member.islnk() or member.isdev():
            raise tarfile.ExtractError(f"Member {member.name!r} is a link or device")
    return {}


def unpack_archive(archive_path: Path, target: Path, metallicity: str = METALLICITY) -> None:
    """
    Unpack a track archive so that its files end up in ``target``.

    Extraction happens in a temporary directory next to ``target`` that is
    renamed into place only once unpacking succeeded.

    Raises:
        TrackIOError: If the archive is corrupt or cannot be extracted
    """
    extract_dir = Path(tempfile.mkdtemp(prefix=".unpack-", dir=target.parent))
    try:
        with tarfile.open(archive_path, "r:*") as tar:
            tar.extractall(extract_dir, **_extraction_options(tar, extract_dir))
        _unpacked_root(extract_dir, metallicity).rename(target)
    except (tarfile.TarError, OSError) as e:
        raise TrackIOError(f"Could not unpack {archive_path}: {e}") from e
    finally:
        shutil.rmtree(extract_dir, ignore_errors=True)


def ensure_source_files(
    data_dir: Path,
    metallicity: str = METALLICITY,
    url: Optional[str] = None,
    verbose: bool = True,
) -> Path:
    """
    Make sure the unpacked source tracks exist, downloading them if needed.

    Args:
        data_dir: Private data directory
        metallicity: Name of the track set, also the unpacked directory name
        url: Archive URL (defaults to the configured PARSEC archive)
        verbose: Print progress

    Returns:
        Directory holding the track files
    """
    data_dir = Path(data_dir)
    target = data_dir / metallicity
    if target.is_dir():
        return target

    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise TrackIOError(f"Could not create data directory {data_dir}: {e}") from e

    if verbose:
        print(f"\tDownloading PARSEC data to {data_dir}")
    with tempfile.TemporaryDirectory(prefix=".download-", dir=data_dir) as download_dir:
        archive_path = Path(download_dir) / f"{metallicity}.tar.gz"
        url = url or f"{ARCHIVE_BASE_URL}{metallicity}.tar.gz"
        download_file(url, archive_path, verbose=verbose)
        unpack_archive(archive_path, target, metallicity)
    return target
