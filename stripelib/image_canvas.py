"""
ImageCanvas - Helper class for showing the preview raster on a Tk canvas.
"""

import tkinter as tk

import cv2
import cv3
import numpy as np
from PIL import Image, ImageTk

# Grey shown around the image
BACKGROUND = 64


class ImageCanvas:
    """
    Fits an image into a canvas and maps pointer positions back to image space.

    The image is scaled uniformly to fit and centered; there is no zoom or
    pan, so canvas_to_image_coords only undoes that fit.
    """

    def __init__(self, canvas, canvas_width, canvas_height):
        self.canvas = canvas
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height

        self.scale = 1.0
        self.offset = (0.0, 0.0)

        # PhotoImage reference (must keep reference to prevent garbage collection)
        self.photo = None

    def update_canvas_size(self, width, height):
        """Update canvas dimensions"""
        self.canvas_width = max(1, width)
        self.canvas_height = max(1, height)

    def clear(self):
        """Clear the canvas"""
        self.canvas.delete("all")
        self.photo = None

    def fit(self, image_width, image_height):
        """Compute scale and offset that center the image in the canvas"""
        scale_w = self.canvas_width / image_width
        scale_h = self.canvas_height / image_height
        self.scale = min(scale_w, scale_h)

        new_width = image_width * self.scale
        new_height = image_height * self.scale
        self.offset = ((self.canvas_width - new_width) / 2.0,
                       (self.canvas_height - new_height) / 2.0)
        return self.scale, self.offset

    def canvas_to_image_coords(self, canvas_x, canvas_y):
        """Convert canvas coordinates to image coordinates"""
        img_x = (canvas_x - self.offset[0]) / self.scale
        img_y = (canvas_y - self.offset[1]) / self.scale
        return img_x, img_y

    def image_to_canvas_coords(self, img_x, img_y):
        """Convert image coordinates to canvas coordinates"""
        canvas_x = img_x * self.scale + self.offset[0]
        canvas_y = img_y * self.scale + self.offset[1]
        return canvas_x, canvas_y

    def compose(self, image, overlay_callback=None):
        """
        Build the canvas-sized RGB frame for an image.

        Args:
            image: numpy array, grayscale, RGB or RGBA
            overlay_callback: optional function(canvas_image, image_canvas)
                            to draw overlays in canvas coordinates

        Returns:
            numpy array (canvas_height, canvas_width, 3)
        """
        if image.ndim == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
        elif image.shape[2] == 4:
            image = cv2.cvtColor(image, cv2.COLOR_RGBA2RGB)

        height, width = image.shape[:2]
        self.fit(width, height)

        new_width = max(1, int(round(width * self.scale)))
        new_height = max(1, int(round(height * self.scale)))
        display_image = cv3.resize(image, new_width, new_height)

        canvas_image = np.full((self.canvas_height, self.canvas_width, 3), BACKGROUND, dtype=np.uint8)

        x_offset = int(max(0, self.offset[0]))
        y_offset = int(max(0, self.offset[1]))
        visible = display_image[:self.canvas_height - y_offset, :self.canvas_width - x_offset]
        h, w = visible.shape[:2]
        canvas_image[y_offset:y_offset + h, x_offset:x_offset + w] = visible

        if overlay_callback:
            overlay_callback(canvas_image, self)

        return canvas_image

    def display_image(self, image, overlay_callback=None):
        """Show an image on the canvas, fitted and centered"""
        if image is None:
            return

        canvas_image = self.compose(image, overlay_callback)

        img_pil = Image.fromarray(canvas_image)
        self.photo = ImageTk.PhotoImage(image=img_pil)

        self.canvas.delete("all")
        self.canvas.create_image(0, 0, anchor=tk.NW, image=self.photo)
