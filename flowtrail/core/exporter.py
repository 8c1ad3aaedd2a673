"""
Frame Exporter - Writes rendered frames to GIF or PNG sequences
"""

from PIL import Image
import numpy as np
from pathlib import Path
from typing import List, Optional


class FrameExporter:
    """Exports RGBA frames to various formats"""

    @classmethod
    def to_png(cls, frame: np.ndarray, path: str | Path) -> Path:
        """Export a single frame to PNG"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        img = Image.fromarray(frame.astype(np.uint8), 'RGBA')
        img.save(path, 'PNG')

        return path

    @classmethod
    def to_gif(
        cls,
        frames: List[np.ndarray],
        path: str | Path,
        duration: int = 33,
        loop: int = 0,
        background: Optional[tuple] = None
    ) -> Path:
        """
        Export frames to an animated GIF.

        Args:
            frames: RGBA arrays of identical size
            path: Output file
            duration: Milliseconds per frame
            loop: 0 loops forever
            background: RGB to flatten onto; None keeps transparency
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        if not frames:
            raise ValueError("No frames to export")

        images = []
        for frame in frames:
            img = Image.fromarray(frame.astype(np.uint8), 'RGBA')

            if background is not None:
                flat = Image.new('RGBA', img.size, tuple(background[:3]) + (255,))
                flat.alpha_composite(img)
                images.append(flat.convert('RGB').convert('P', palette=Image.Palette.ADAPTIVE, colors=256))
                continue

            # Transparent pixels map to palette index 255
            alpha = img.split()[3]
            mask = Image.eval(alpha, lambda a: 255 if a < 128 else 0)
            img_p = img.convert('RGB').convert('P', palette=Image.Palette.ADAPTIVE, colors=255)
            img_p.paste(255, mask)
            images.append(img_p)

        save_kwargs = dict(
            save_all=True,
            append_images=images[1:],
            duration=duration,
            loop=loop,
            disposal=2,
        )
        if background is None:
            save_kwargs['transparency'] = 255

        images[0].save(path, **save_kwargs)

        return path

    @classmethod
    def to_frames(
        cls,
        frames: List[np.ndarray],
        directory: str | Path,
        prefix: str = "frame"
    ) -> List[Path]:
        """Export frames as individual PNGs"""
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        if not frames:
            raise ValueError("No frames to export")

        paths = []
        for i, frame in enumerate(frames):
            frame_path = directory / f"{prefix}_{i:04d}.png"
            cls.to_png(frame, frame_path)
            paths.append(frame_path)

        return paths
