"""
Drawing of the curve editing overlay: control polygon, curve and handles.
"""

import cv2
import cv3
import numpy as np

POLYGON_COLOR = (255, 255, 255)
POLYGON_ALPHA = 0.35
CURVE_COLOR = (255, 255, 255)
HANDLE_COLOR = (235, 235, 235)
ACTIVE_HANDLE_COLOR = (255, 200, 0)
HANDLE_OUTLINE = (40, 40, 40)

# Handle diameter in preview units
HANDLE_SIZE = 28


def draw_curve_overlay(canvas_image, image_canvas, curve, active_index=None):
    """
    Draw the curve editing overlay onto a canvas frame.

    Args:
        canvas_image: RGB numpy array in canvas coordinates, drawn in place
        image_canvas: ImageCanvas that maps image to canvas coordinates
        curve: CurveModel in image (preview) coordinates
        active_index: Index of the handle being dragged, if any
    """
    points = [image_canvas.image_to_canvas_coords(x, y) for x, y in curve.get_points()]
    points = [(int(round(x)), int(round(y))) for x, y in points]

    # Control polygon, faded
    layer = canvas_image.copy()
    for (x0, y0), (x1, y1) in zip(points[:-1], points[1:]):
        cv3.line(layer, x0, y0, x1, y1, color=POLYGON_COLOR, t=1)
    cv2.addWeighted(layer, POLYGON_ALPHA, canvas_image, 1.0 - POLYGON_ALPHA, 0, dst=canvas_image)

    # Curve
    polyline = np.array([image_canvas.image_to_canvas_coords(x, y)
                         for x, y in curve.curve_points(200)])
    polyline = np.round(polyline).astype(np.int32).reshape(-1, 1, 2)
    cv2.polylines(canvas_image, [polyline], False, CURVE_COLOR, 2, cv2.LINE_AA)

    # Handles, kept at least a few pixels wide when the preview is shrunk
    radius = max(4, int(round(HANDLE_SIZE / 2 * image_canvas.scale)))
    for i, (x, y) in enumerate(points):
        color = ACTIVE_HANDLE_COLOR if i == active_index else HANDLE_COLOR
        cv3.circle(canvas_image, x, y, radius, color=color, fill=True)
        cv3.circle(canvas_image, x, y, radius, color=HANDLE_OUTLINE, t=1)

    return canvas_image
