"""Thumbnail remake compositor built on Pillow."""
import asyncio
import io
import os
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Tuple

from PIL import Image, ImageDraw, ImageEnhance, ImageFilter, ImageFont, UnidentifiedImageError

from app.core.config import settings, CanvasConfig
from app.core.exceptions import GenerationError, ThumbnailFetchError
from app.models.composition import CompositionRequest, GeneratedImage, RemakeSession, StepResult
from app.models.style import ZoneStyleAttributes, PercentStyleAttributes
from app.services.thumbnail_downloader import ThumbnailDownloader
from app.utils.logging import CorrelatedLogger, MetricsLogger

Color = Tuple[int, int, int, int]

# Pillow anchors: horizontal edge + vertical middle
ALIGNMENT_ANCHORS = {"left": "lm", "center": "mm", "right": "rm"}

LINE_SPACING = 1.2

_HEX_COLOR = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')

# Hangul and CJK ranges missing from Pillow's default font
_WIDE_SCRIPT = re.compile(r'[\u1100-\u11FF\u2E80-\u9FFF\uAC00-\uD7AF\uFF00-\uFFEF]')


def parse_hex_color(value: Optional[str], alpha: int = 255, default: str = "#FFFFFF") -> Color:
    """Convert #RGB or #RRGGBB to an RGBA tuple."""
    if not value or not _HEX_COLOR.match(value):
        value = default
    digits = value[1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16), alpha


def compute_font_size(style, height: int) -> int:
    """Font size in pixels as a fraction of canvas height."""
    if isinstance(style, ZoneStyleAttributes):
        ratio = CanvasConfig.ZONE_FONT_SIZES.get(style.font_size, CanvasConfig.ZONE_FONT_SIZES["large"])
        return max(1, round(height * ratio))

    percent = min(max(style.font_size_percent, 4.0), 25.0)
    return max(1, round(height * percent / 100))


def zone_text_anchor(position: str, width: int, height: int) -> Tuple[float, float, str]:
    """Look up (x, y, alignment) for a named zone such as ``bottom-center``."""
    if position == "center":
        row, column = "center", "center"
    else:
        row, _, column = position.partition("-")

    y_by_row = {
        "top": CanvasConfig.ZONE_TOP_Y,
        "center": height / 2,
        "bottom": height - CanvasConfig.ZONE_BOTTOM_MARGIN,
    }
    x_by_column = {
        "left": CanvasConfig.ZONE_PADDING,
        "center": width / 2,
        "right": width - CanvasConfig.ZONE_PADDING,
    }

    if row not in y_by_row or column not in x_by_column:
        row, column = "bottom", "center"

    return x_by_column[column], y_by_row[row], column


def percent_text_anchor(style: PercentStyleAttributes, width: int, height: int) -> Tuple[float, float, str]:
    """Scale percentage coordinates against the canvas; values are clamped first."""
    x_percent = min(max(style.x_percent, 0.0), 100.0)
    y_percent = min(max(style.y_percent, 0.0), 100.0)
    alignment = style.alignment if style.alignment in ALIGNMENT_ANCHORS else "center"
    return width * x_percent / 100, height * y_percent / 100, alignment


def text_anchor(style, width: int, height: int) -> Tuple[float, float, str]:
    if isinstance(style, ZoneStyleAttributes):
        return zone_text_anchor(style.text_position, width, height)
    return percent_text_anchor(style, width, height)


def stroke_width_for(font_px: int) -> int:
    return max(round(font_px * CanvasConfig.STROKE_WIDTH_RATIO), CanvasConfig.MIN_STROKE_WIDTH)


def is_bold(style) -> bool:
    weight = style.font_style if isinstance(style, ZoneStyleAttributes) else style.font_weight
    if weight == "bold":
        return True
    return weight.isdigit() and int(weight) >= 600


def fit_user_image(image_size: Tuple[int, int], canvas_size: Tuple[int, int]) -> Tuple[int, int]:
    """Scale an image to fit 90% of canvas height and 70% of width, keeping aspect."""
    image_w, image_h = image_size
    canvas_w, canvas_h = canvas_size
    max_w = canvas_w * CanvasConfig.USER_IMAGE_MAX_WIDTH_RATIO
    max_h = canvas_h * CanvasConfig.USER_IMAGE_MAX_HEIGHT_RATIO
    scale = min(max_w / image_w, max_h / image_h)
    return max(1, round(image_w * scale)), max(1, round(image_h * scale))


def resolve_font_path() -> Optional[str]:
    """FONT_PATH when set, else the first installed Hangul-capable font."""
    if settings.font_path:
        return settings.font_path
    for candidate in CanvasConfig.FONT_CANDIDATES:
        if os.path.isfile(candidate):
            return candidate
    return None


def load_font(size: int, text: str = ""):
    """
    TrueType font for the caption.

    Pillow's scalable default font is used only when no font file is found
    and the caption has no Hangul or CJK characters, which it would draw as
    empty boxes.
    """
    font_path = resolve_font_path()
    if font_path:
        try:
            return ImageFont.truetype(font_path, size)
        except OSError as e:
            raise GenerationError("load_font", f"Cannot open font {font_path}: {str(e)}")

    if _WIDE_SCRIPT.search(text):
        raise GenerationError(
            "load_font", "No Hangul-capable font found; set FONT_PATH to a font such as Noto Sans KR"
        )
    return ImageFont.load_default(size=size)


def decode_image(content: bytes, step: str) -> Image.Image:
    try:
        with Image.open(io.BytesIO(content)) as image:
            return image.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise GenerationError(step, f"Cannot decode image: {str(e)}")


@dataclass
class RenderState:
    """Mutable state owned by one generation."""
    request: CompositionRequest
    canvas: Image.Image
    background: Optional[Image.Image] = None
    user_image: Optional[Image.Image] = None
    lines: List[str] = field(default_factory=list)
    font: Optional[object] = None
    font_px: int = 0


class ThumbnailCompositor:
    """Renders a remake thumbnail through an ordered pipeline of steps."""

    def __init__(self, downloader: Optional[ThumbnailDownloader] = None, max_concurrent: Optional[int] = None):
        self.downloader = downloader or ThumbnailDownloader()
        self.semaphore = asyncio.Semaphore(max_concurrent or settings.max_concurrent_generations)
        self.logger = CorrelatedLogger(__name__)
        self.metrics = MetricsLogger()

        self.steps: List[Tuple[str, Callable[[RenderState], Awaitable[Optional[str]]]]] = [
            ("load_background", self.load_background),
            ("draw_background", self.draw_background),
            ("draw_gradient", self.draw_gradient),
            ("load_user_image", self.load_user_image),
            ("draw_user_image", self.draw_user_image),
            ("draw_text_stroke", self.draw_text_stroke),
            ("draw_text_fill", self.draw_text_fill),
        ]

    async def generate(
        self,
        request: CompositionRequest,
        remake_session: Optional[RemakeSession] = None,
        request_id: Optional[str] = None
    ) -> GeneratedImage:
        """
        Run the pipeline and return the encoded PNG.

        Args:
            request: Background, user image, caption and style for this generation
            remake_session: Updated with the new image only when generation succeeds
            request_id: Request ID for log correlation

        Raises:
            GenerationError: If any step fails; no partial image is produced
        """
        if request_id:
            self.logger.request_id = request_id

        async with self.semaphore:
            start_time = datetime.now()
            state = RenderState(
                request=request,
                canvas=Image.new("RGBA", (request.width, request.height), (0, 0, 0, 255))
            )
            results: List[StepResult] = []

            for name, step in self.steps:
                step_start = datetime.now()
                try:
                    detail = await step(state)
                except GenerationError as e:
                    processing_time = int((datetime.now() - start_time).total_seconds() * 1000)
                    self.logger.error(f"Generation failed at {e.details.get('step')}: {e.details.get('reason')}")
                    self.metrics.log_generation_metrics(
                        request_id or "-", request.session.video_id, success=False,
                        processing_time_ms=processing_time, step_count=len(results),
                        failed_step=e.details.get("step")
                    )
                    raise

                results.append(self._step_result(name, step_start, detail))

            encode_start = datetime.now()
            content = await asyncio.to_thread(self.encode, state.canvas)
            results.append(self._step_result("encode", encode_start, None))

        image = GeneratedImage(
            video_id=request.session.video_id,
            content=content,
            width=request.width,
            height=request.height,
            filename=f"custom_thumbnail_{request.session.video_id}.png",
            steps=results
        )

        processing_time = int((datetime.now() - start_time).total_seconds() * 1000)
        self.metrics.log_generation_metrics(
            request_id or "-", request.session.video_id, success=True,
            processing_time_ms=processing_time, step_count=len(results)
        )

        if remake_session is not None:
            remake_session.generated_image = image

        return image

    def _step_result(self, name: str, started: datetime, detail: Optional[str]) -> StepResult:
        duration = int((datetime.now() - started).total_seconds() * 1000)
        status = "skipped" if detail == "skipped" else "completed"
        return StepResult(name=name, status=status, duration_ms=duration, detail=None if status == "skipped" else detail)

    async def load_background(self, state: RenderState) -> Optional[str]:
        request = state.request
        content = request.background_image
        source = "upload"

        if content is None:
            if not request.background_url:
                raise GenerationError("load_background", "No background image")
            try:
                content, _ = await self.downloader.fetch_bytes(request.background_url)
            except ThumbnailFetchError as e:
                raise GenerationError("load_background", e.details.get("reason", e.message))
            source = request.background_url

        state.background = await asyncio.to_thread(decode_image, content, "load_background")
        return source

    async def draw_background(self, state: RenderState) -> Optional[str]:
        state.canvas = await asyncio.to_thread(self._render_background, state.background, state.canvas.size)
        return None

    def _render_background(self, background: Image.Image, size: Tuple[int, int]) -> Image.Image:
        width, height = size
        bleed = CanvasConfig.BACKGROUND_BLEED

        layer = background.convert("RGB").resize((width + bleed * 2, height + bleed * 2), Image.LANCZOS)
        layer = layer.filter(ImageFilter.GaussianBlur(CanvasConfig.BACKGROUND_BLUR_RADIUS))
        layer = ImageEnhance.Brightness(layer).enhance(CanvasConfig.BACKGROUND_BRIGHTNESS)
        layer = ImageEnhance.Color(layer).enhance(CanvasConfig.BACKGROUND_SATURATION)
        layer = layer.crop((bleed, bleed, bleed + width, bleed + height))
        return layer.convert("RGBA")

    async def draw_gradient(self, state: RenderState) -> Optional[str]:
        width, height = state.canvas.size
        stops = CanvasConfig.GRADIENT_STOPS

        column = Image.new("L", (1, height))
        for y in range(height):
            offset = y / max(height - 1, 1)
            column.putpixel((0, y), round(self._gradient_alpha(offset, stops) * 255))

        overlay = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        overlay.putalpha(column.resize((width, height)))
        state.canvas.alpha_composite(overlay)
        return None

    def _gradient_alpha(self, offset: float, stops: List[Tuple[float, float]]) -> float:
        for (start, start_alpha), (end, end_alpha) in zip(stops, stops[1:]):
            if start <= offset <= end:
                span = end - start
                t = (offset - start) / span if span else 0.0
                return start_alpha + (end_alpha - start_alpha) * t
        return stops[-1][1]

    async def load_user_image(self, state: RenderState) -> Optional[str]:
        if not state.request.user_image:
            return "skipped"
        state.user_image = await asyncio.to_thread(decode_image, state.request.user_image, "load_user_image")
        return f"{state.user_image.width}x{state.user_image.height}"

    async def draw_user_image(self, state: RenderState) -> Optional[str]:
        if state.user_image is None:
            return "skipped"

        canvas = state.canvas
        size = fit_user_image(state.user_image.size, canvas.size)
        image = state.user_image.resize(size, Image.LANCZOS)
        x = (canvas.width - size[0]) // 2
        y = canvas.height - size[1]

        shadow = CanvasConfig.USER_IMAGE_SHADOW
        shadow_layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        mask = image.getchannel("A").point(lambda a: round(a * shadow["alpha"]))
        offset_x, offset_y = shadow["offset"]
        shadow_layer.paste((0, 0, 0, 255), (x + offset_x, y + offset_y), mask)
        shadow_layer = shadow_layer.filter(ImageFilter.GaussianBlur(shadow["blur"]))

        canvas.alpha_composite(shadow_layer)
        canvas.alpha_composite(image, (x, y))
        return f"{size[0]}x{size[1]}"

    def _prepare_text(self, state: RenderState) -> bool:
        """Resolve lines and font once; False when there is no caption."""
        if state.font is not None:
            return True

        lines = [line.strip() for line in state.request.caption.splitlines() if line.strip()]
        if not lines:
            return False

        state.lines = lines
        state.font_px = compute_font_size(state.request.style, state.canvas.height)
        state.font = load_font(state.font_px, "".join(lines))
        return True

    def _line_positions(self, state: RenderState) -> List[Tuple[Tuple[float, float], str, str]]:
        """Per-line (xy, text, anchor); the block is vertically centred on y."""
        x, y, alignment = text_anchor(state.request.style, state.canvas.width, state.canvas.height)
        anchor = ALIGNMENT_ANCHORS[alignment]
        line_height = state.font_px * LINE_SPACING
        top = y - line_height * len(state.lines) / 2
        return [
            ((x, top + line_height * (index + 0.5)), line, anchor)
            for index, line in enumerate(state.lines)
        ]

    async def draw_text_stroke(self, state: RenderState) -> Optional[str]:
        if not self._prepare_text(state):
            return "skipped"

        style = state.request.style
        if isinstance(style, ZoneStyleAttributes):
            color = CanvasConfig.ZONE_STROKE["color"]
            width = CanvasConfig.ZONE_STROKE["width"]
        else:
            if style.stroke_color is None:
                return "skipped"
            color = parse_hex_color(style.stroke_color, default="#000000")
            width = stroke_width_for(state.font_px)

        # Pillow strokes grow outward only; use half the centred line width
        outline = max(1, round(width / 2))
        stroke_layer = Image.new("RGBA", state.canvas.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(stroke_layer)
        for xy, line, anchor in self._line_positions(state):
            draw.text(xy, line, font=state.font, fill=color, anchor=anchor, stroke_width=outline, stroke_fill=color)
        state.canvas.alpha_composite(stroke_layer)
        return f"width={width}"

    async def draw_text_fill(self, state: RenderState) -> Optional[str]:
        if not self._prepare_text(state):
            return "skipped"

        style = state.request.style
        fill = parse_hex_color(style.text_color)
        # Faux bold when only a single-weight font is available
        weight_stroke = max(1, state.font_px // 40) if is_bold(style) else 0
        positions = self._line_positions(state)

        shadow = CanvasConfig.TEXT_SHADOW
        offset_x, offset_y = shadow["offset"]
        shadow_layer = Image.new("RGBA", state.canvas.size, (0, 0, 0, 0))
        shadow_draw = ImageDraw.Draw(shadow_layer)
        shadow_color = (0, 0, 0, round(255 * shadow["alpha"]))
        for (x, y), line, anchor in positions:
            shadow_draw.text(
                (x + offset_x, y + offset_y), line, font=state.font, fill=shadow_color, anchor=anchor,
                stroke_width=weight_stroke, stroke_fill=shadow_color
            )
        state.canvas.alpha_composite(shadow_layer.filter(ImageFilter.GaussianBlur(shadow["blur"])))

        draw = ImageDraw.Draw(state.canvas)
        for xy, line, anchor in positions:
            draw.text(xy, line, font=state.font, fill=fill, anchor=anchor, stroke_width=weight_stroke, stroke_fill=fill)
        return f"{len(positions)} line(s) at {state.font_px}px"

    def encode(self, canvas: Image.Image) -> bytes:
        buffer = io.BytesIO()
        canvas.convert("RGB").save(buffer, format="PNG")
        return buffer.getvalue()
