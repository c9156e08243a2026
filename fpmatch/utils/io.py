"""
I/O utilities for fingerprint minutiae matching.

Provides functions for loading and saving fingerprint images and
minutiae signatures.
"""

import json
from pathlib import Path
from typing import Any, List, Union

import cv2
import numpy as np

from fpmatch.minutiae.minutiae_extraction import Minutia
from fpmatch.minutiae.thinning import binarize_image


# Supported image extensions
SUPPORTED_EXTENSIONS = {'.tif', '.tiff', '.png', '.jpg', '.jpeg', '.bmp'}


def load_image(
    path: Union[str, Path],
    grayscale: bool = True
) -> np.ndarray:
    """
    Load an image from disk.

    Args:
        path: Path to the image file
        grayscale: Whether to load as grayscale

    Returns:
        Image as numpy array

    Raises:
        FileNotFoundError: If image file does not exist
        ValueError: If image cannot be loaded
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")

    flag = cv2.IMREAD_GRAYSCALE if grayscale else cv2.IMREAD_COLOR
    image = cv2.imread(str(path), flag)

    if image is None:
        raise ValueError(f"Failed to load image: {path}")

    return image


def load_binary_image(
    path: Union[str, Path],
    method: str = 'otsu'
) -> np.ndarray:
    """
    Load a fingerprint image as a boolean pixel grid.

    Args:
        path: Path to the image file
        method: Binarization method ('global', 'adaptive' or 'otsu')

    Returns:
        Boolean grid (ridges = True)
    """
    return binarize_image(load_image(path, grayscale=True), method)


def save_image(
    image: np.ndarray,
    path: Union[str, Path]
) -> None:
    """
    Save an image to disk.

    Boolean grids are written black ridges on a white background.

    Args:
        image: Boolean grid, grayscale or BGR image
        path: Output path

    Raises:
        ValueError: If the image cannot be written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if image.dtype == bool:
        image = np.where(image, 0, 255).astype(np.uint8)
    elif image.dtype in [np.float32, np.float64]:
        image = (image * 255).clip(0, 255).astype(np.uint8)

    if not cv2.imwrite(str(path), image):
        raise ValueError(f"Failed to write image: {path}")


def is_image_path(path: Union[str, Path]) -> bool:
    """Return True if the path has a supported image extension."""
    return Path(path).suffix.lower() in SUPPORTED_EXTENSIONS


def load_json(path: Union[str, Path]) -> Any:
    """Load a JSON file."""
    with open(path, 'r') as f:
        return json.load(f)


def save_json(data: Any, path: Union[str, Path], indent: int = 2) -> None:
    """Save data to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(data, f, indent=indent, default=str)


def load_signature(path: Union[str, Path]) -> List[Minutia]:
    """
    Load a minutiae signature from a JSON file.

    Expected format: List of dicts with 'row', 'col', 'angle' keys.

    Args:
        path: Path to signature file

    Returns:
        List of minutiae
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Signature not found: {path}")

    data = load_json(path)
    if not isinstance(data, list):
        raise ValueError(f"Signature file must contain a list: {path}")

    return [Minutia.from_dict(d) for d in data]


def save_signature(
    minutiae: List[Minutia],
    path: Union[str, Path]
) -> None:
    """
    Save a minutiae signature to a JSON file.

    Args:
        minutiae: List of minutiae
        path: Output path
    """
    save_json([m.to_dict() for m in minutiae], path)
