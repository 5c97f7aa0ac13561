"""
DualResolutionCoordinator - Keeps the live preview and the full-resolution export in step.
"""

import logging
import threading
from datetime import datetime

import numpy as np

from . import image_io, scanline_mapper, stripe_renderer
from .curve_model import HIT_RADIUS, CurveModel
from .errors import EncodingError, InputError

# Longer side of the preview raster
PREVIEW_MAX = 1200


def make_export_filename(now=None):
    """Build a timestamped file name for an export"""
    if now is None:
        now = datetime.now()
    return now.strftime("bezier_stripes_%Y-%m-%d_%H-%M-%S.png")


class StripeSession:
    """
    Everything tied to one loaded image.

    Created on every image load and dropped on the next one. The curve lives
    in preview coordinates; scale_x/scale_y carry it to full resolution.
    """

    def __init__(self, full_image, preview_image, source_path=None, hit_radius=HIT_RADIUS):
        self.full_image = full_image
        self.preview_image = preview_image
        self.source_path = source_path

        full_h, full_w = full_image.shape[:2]
        preview_h, preview_w = preview_image.shape[:2]
        self.scale_x = full_w / preview_w
        self.scale_y = full_h / preview_h

        self.curve = CurveModel(hit_radius=hit_radius)
        self.curve.reset(preview_w, preview_h)

        self.preview_map = None
        self.preview_render = None

    @property
    def preview_size(self):
        """(width, height) of the preview raster"""
        h, w = self.preview_image.shape[:2]
        return w, h

    @property
    def full_size(self):
        """(width, height) of the original image"""
        h, w = self.full_image.shape[:2]
        return w, h

    def get_info_text(self):
        preview_w, preview_h = self.preview_size
        full_w, full_h = self.full_size
        return f"Preview: {preview_w}x{preview_h} | Export: {full_w}x{full_h}"


class DualResolutionCoordinator:
    """
    Drives the stripe pipeline for the preview and for the export.

    Every curve edit rebuilds the preview map and re-renders the preview.
    Export scales the curve to full resolution and renders from the
    original pixels. While an export runs the busy flag rejects edits,
    image loads and further exports.
    """

    def __init__(self, preview_max=PREVIEW_MAX,
                 preview_samples=scanline_mapper.PREVIEW_SAMPLES,
                 export_samples=scanline_mapper.EXPORT_SAMPLES,
                 hit_radius=HIT_RADIUS):
        """
        Initialize the coordinator.

        Args:
            preview_max: Longest side of the preview raster
            preview_samples: Curve samples for the live preview map
            export_samples: Curve samples for the full-resolution map
            hit_radius: Pick radius for control points, in preview units
        """
        if preview_max < 1:
            raise ValueError("Preview size must be positive")

        self.preview_max = preview_max
        self.preview_samples = preview_samples
        self.export_samples = export_samples
        self.hit_radius = hit_radius

        self.session = None
        self.busy = False
        self._export_thread = None

    def has_image(self):
        """Check if an image is loaded"""
        return self.session is not None

    def is_busy(self):
        """Check if an export is running"""
        return self.busy

    # ---------- Image loading ----------

    def load_image(self, image, source_path=None):
        """
        Start a new session for a decoded full-resolution image.

        Raises:
            InputError: If there is no usable image, or an export is running
        """
        if self.busy:
            raise InputError("Cannot load an image while exporting")
        if image is None:
            raise InputError("No image loaded")

        image = np.asarray(image)
        if image.ndim not in (2, 3) or image.shape[0] == 0 or image.shape[1] == 0:
            raise InputError(f"Unsupported image shape {image.shape}")
        if image.dtype != np.uint8:
            raise InputError(f"Unsupported pixel type {image.dtype}, expected 8-bit")

        preview = image_io.make_preview(image, self.preview_max)
        session = StripeSession(image, preview, source_path=source_path,
                                hit_radius=self.hit_radius)

        # Previous session stays in place until the new one is fully built
        self._rebuild(session)
        self.session = session
        logging.info(f"Session started: {session.get_info_text()}")
        return session

    def load_image_from_path(self, file_path):
        """Decode an image file and start a new session for it"""
        if self.busy:
            raise InputError("Cannot load an image while exporting")
        image = image_io.read_image(file_path)
        return self.load_image(image, source_path=file_path)

    # ---------- Curve editing ----------

    def _require_session(self):
        if self.session is None:
            raise InputError("No image loaded")
        return self.session

    def reset_curve(self):
        """Put the curve back to its default layout and redraw"""
        session = self._require_session()
        if self.busy:
            return False
        session.curve.reset(*session.preview_size)
        self.rebuild_preview()
        return True

    def pick_point(self, x, y):
        """Index of the control point at preview position (x, y), or None"""
        if self.session is None or self.busy:
            return None
        return self.session.curve.hit_test(x, y)

    def move_point(self, index, x, y):
        """
        Drag a control point to preview position (x, y) and redraw.

        Positions outside the preview are clamped to its edges.

        Returns:
            bool: True if the curve changed
        """
        if self.session is None or self.busy:
            return False
        if not self.session.curve.move_point(index, x, y, self.session.preview_size):
            return False
        self.rebuild_preview()
        return True

    def rebuild_preview(self):
        """Rebuild the preview scanline map and stripe raster from scratch"""
        return self._rebuild(self._require_session())

    def _rebuild(self, session):
        preview_h = session.preview_image.shape[0]

        session.preview_map = scanline_mapper.build(
            session.curve, preview_h, self.preview_samples)
        session.preview_render = stripe_renderer.render(
            session.preview_image, session.preview_map)
        return session.preview_render

    # ---------- Export ----------

    def render_export(self):
        """
        Render the stripe image at the original resolution.

        The curve is scaled from preview space and the colors come from the
        original pixels, not the preview.
        """
        session = self._require_session()
        full_h = session.full_image.shape[0]

        export_curve = session.curve.scaled_by(session.scale_x, session.scale_y)
        export_map = scanline_mapper.build(export_curve, full_h, self.export_samples)
        logging.debug(f"Export map: {export_map.valid_count()}/{full_h} rows valid")
        return stripe_renderer.render(session.full_image, export_map)

    def _run_export(self, persist, now):
        image = self.render_export()
        filename = make_export_filename(now)
        try:
            persist(image, filename)
        except EncodingError:
            raise
        except (OSError, ValueError, TypeError) as e:
            raise EncodingError(f"Could not save {filename} - {e}") from e
        logging.info(f"Exported {filename}")
        return filename

    def export(self, persist, now=None):
        """
        Render the full-resolution image and hand it to persist.

        Args:
            persist: Callable persist(image, filename) that stores the image;
                OSError, ValueError and TypeError from it become EncodingError
            now: Optional datetime for the file name

        Returns:
            str: The generated file name

        Raises:
            InputError: If no image is loaded or an export is already running
            EncodingError: If the image cannot be saved
        """
        self._require_session()
        if self.busy:
            raise InputError("An export is already running")

        self.busy = True
        try:
            return self._run_export(persist, now)
        finally:
            self.busy = False

    def start_export(self, persist, on_done, now=None):
        """
        Run the export on a worker thread.

        The busy flag is raised before the thread starts, so edits and a
        second export are rejected right away. on_done(filename, error) is
        called from the worker when it finishes, with error None on success.

        Returns:
            bool: False if no image is loaded or an export is already running
        """
        if self.session is None or self.busy:
            return False

        self.busy = True

        def worker():
            filename = None
            error = None
            try:
                filename = self._run_export(persist, now)
            except Exception as e:
                logging.error(f"Export failed: {e}")
                error = e
            finally:
                self.busy = False
            on_done(filename, error)

        self._export_thread = threading.Thread(target=worker, name="stripe-export", daemon=True)
        try:
            self._export_thread.start()
        except RuntimeError:
            self.busy = False
            raise
        return True

    def wait_for_export(self, timeout=None):
        """Block until the running export finishes"""
        if self._export_thread is not None:
            self._export_thread.join(timeout)
