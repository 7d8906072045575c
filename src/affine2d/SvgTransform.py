import logging
import math
import re
from typing import List, Optional

from affine2d.AffineTransform import AffineTransform
from affine2d.InvalidArgument import InvalidArgument

logger = logging.getLogger(__name__)


class SvgTransform:
    """Builds an AffineTransform from an SVG transform attribute."""

    TOKEN_RE = re.compile(r"\b(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)")

    @staticmethod
    def _numbers(args: str) -> List[float]:
        parts = [p for p in re.split(r"[\s,]+", args.strip()) if p]
        try:
            return [float(p) for p in parts]
        except ValueError:
            raise InvalidArgument(f"Bad number in transform arguments: {args!r}") from None

    @staticmethod
    def operation(name: str, parts: List[float]) -> Optional[AffineTransform]:
        """Transform for a single SVG function, or None if the call is not understood."""
        if name == "matrix" and len(parts) == 6:
            # SVG (a b c d e f) is x' = a*x + c*y + e, y' = b*x + d*y + f
            return AffineTransform(*parts)
        if name == "translate" and len(parts) in (1, 2):
            ty = parts[1] if len(parts) == 2 else 0.0
            return AffineTransform().translate(parts[0], ty)
        if name == "scale" and len(parts) in (1, 2):
            sy = parts[1] if len(parts) == 2 else None
            return AffineTransform().scale(parts[0], sy)
        if name == "rotate" and len(parts) == 1:
            return AffineTransform().rotate(parts[0])
        if name == "rotate" and len(parts) == 3:
            angle, cx, cy = parts
            return AffineTransform().translate(-cx, -cy).rotate(angle).translate(cx, cy)
        if name == "skewX" and len(parts) == 1:
            return AffineTransform().shear(math.tan(math.radians(parts[0])), 0.0)
        if name == "skewY" and len(parts) == 1:
            return AffineTransform().shear(0.0, math.tan(math.radians(parts[0])))
        return None

    @staticmethod
    def parse(text: Optional[str]) -> AffineTransform:
        """Parse e.g. "translate(10,20) rotate(45) scale(2)".

        SVG applies the right-most function to a point first, so each function
        is put in front of the ones already read.
        """
        transform = AffineTransform.identity()
        if not text:
            return transform

        for name, args in SvgTransform.TOKEN_RE.findall(text):
            parts = SvgTransform._numbers(args)
            op = SvgTransform.operation(name, parts)
            if op is None:
                logger.debug("Skipping %s() with %d argument(s)", name, len(parts))
                continue
            transform.pre_concatenate(op)
        return transform
