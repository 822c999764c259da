"""Local OCR built on pytesseract and OpenCV.

Produces the same kind of raw page text an OCR service would return:
one line per detected text line, blank lines between Tesseract blocks.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List

import cv2
import numpy as np
import pandas as pd
import pytesseract

logger = logging.getLogger(__name__)


def load_image(image_path: str) -> np.ndarray:
    """Read an image from disk as a BGR array.

    Doxygen:
    - @param image_path: Path to the image file.
    - @return: BGR image array.
    - @throws FileNotFoundError: If the file does not exist.
    - @throws RuntimeError: If OpenCV cannot decode the file.
    """
    if not os.path.exists(image_path):
        raise FileNotFoundError(f"Image file not found: {image_path}")
    img_bgr = cv2.imread(image_path)
    if img_bgr is None:
        raise RuntimeError(f"Failed to load image: {image_path}")
    return img_bgr


def preprocess_image_for_ocr(img_bgr: np.ndarray) -> np.ndarray:
    """Denoise and binarize a photographed page before OCR.

    Doxygen:
    - @param img_bgr: Input image in BGR format.
    - @return: Single-channel binarized image.
    """
    gray = img_bgr if img_bgr.ndim == 2 else cv2.cvtColor(img_bgr, cv2.COLOR_BGR2GRAY)
    gray = cv2.bilateralFilter(gray, d=7, sigmaColor=50, sigmaSpace=50)
    th = cv2.adaptiveThreshold(gray, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
                               cv2.THRESH_BINARY, 31, 10)
    return cv2.medianBlur(th, 3)


def build_dataframe_from_tesseract(data: Dict[str, Any], conf_threshold: float = 0) -> pd.DataFrame:
    """Create a cleaned word table from ``pytesseract.image_to_data`` output.

    Rows with a confidence at or below ``conf_threshold`` (Tesseract uses -1
    for non-word rows) and rows with blank text are dropped.
    """
    df = pd.DataFrame(data)
    df['conf'] = pd.to_numeric(df['conf'], errors='coerce').fillna(-1)
    df = df[df['conf'] > conf_threshold].copy()
    df['text'] = df['text'].fillna('').astype(str).str.strip()
    df = df[df['text'] != '']
    return df


def group_words_to_lines(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Group words into lines in reading order.

    Doxygen:
    - @param df: DataFrame produced by `build_dataframe_from_tesseract`.
    - @return: Line dicts with ``block_num``, ``text``, ``y`` and ``confidence``.
    """
    if df.empty:
        return []
    lines: List[Dict[str, Any]] = []
    for (block_num, _, _), g in df.groupby(['block_num', 'par_num', 'line_num'], sort=False):
        g_sorted = g.sort_values('left')
        lines.append({
            'block_num': int(block_num),
            'text': ' '.join(g_sorted['text'].tolist()),
            'y': int(g_sorted['top'].min()),
            'confidence': float(g_sorted['conf'].mean()),
        })
    return sorted(lines, key=lambda ln: (ln['block_num'], ln['y']))


def lines_to_text(lines: List[Dict[str, Any]]) -> str:
    """Join lines with newlines and separate Tesseract blocks by a blank line."""
    out: List[str] = []
    previous_block = None
    for line in lines:
        if previous_block is not None and line['block_num'] != previous_block:
            out.append('')
        out.append(line['text'])
        previous_block = line['block_num']
    return '\n'.join(out)


def ocr_image_text(
    img: np.ndarray,
    lang: str = 'eng',
    conf_threshold: int = 30,
    ocr_mode: str = 'auto',
) -> str:
    """Run Tesseract on an image and return raw page text.

    Doxygen:
    - @param img: BGR image array.
    - @param lang: Tesseract language(s), e.g. 'eng' or 'eng+deu'.
    - @param conf_threshold: Minimum word confidence to keep.
    - @param ocr_mode: 'auto' preprocesses the image, 'raw' uses it as is.
    - @return: Page text; empty when nothing was recognized.
    """
    if ocr_mode == 'raw':
        ocr_input = img
    else:
        ocr_input = preprocess_image_for_ocr(img)
    if ocr_input.ndim == 3:
        ocr_input = cv2.cvtColor(ocr_input, cv2.COLOR_BGR2RGB)
    data = pytesseract.image_to_data(ocr_input, lang=lang, output_type=pytesseract.Output.DICT)
    df = build_dataframe_from_tesseract(data, conf_threshold=conf_threshold)
    lines = group_words_to_lines(df)
    logger.info("OCR mode '%s': %d words in %d lines", ocr_mode, len(df), len(lines))
    return lines_to_text(lines)
