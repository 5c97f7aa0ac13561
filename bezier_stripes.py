"""
Bezier Stripes - Interactive stripe effect driven by a cubic Bezier curve
Drag the 4 curve points over a photo; every row takes the color where the curve crosses it
Features: Live preview, Full-resolution export, HEIC input
"""

import argparse
import logging
import os
import queue
import tkinter as tk
from tkinter import filedialog, ttk  # Convenience imports for dialogs and themed widgets

from stripelib import (
    DualResolutionCoordinator,
    StripesError,
    draw_curve_overlay,
    draw_sample_markers,
    image_io,
)
from stripelib.coordinator import PREVIEW_MAX
from stripelib.image_canvas import ImageCanvas
from stripelib.scanline_mapper import EXPORT_SAMPLES

# Milliseconds before a success message is cleared from the status bar
STATUS_CLEAR_DELAY = 1600
EXPORT_POLL_INTERVAL = 50


class StripesGUI:
    def __init__(self, root, preview_max=PREVIEW_MAX, export_samples=EXPORT_SAMPLES, output_dir=None):
        self.root = root
        self.root.title("Bezier Stripes")

        self.coordinator = DualResolutionCoordinator(preview_max=preview_max,
                                                     export_samples=export_samples)
        self.output_dir = output_dir

        # Interaction state
        self.dragging_point = None
        self.show_ui = True

        # Export results come back from the worker thread through this queue
        self.export_results = queue.Queue()
        self._status_clear_job = None

        self.canvas_width = 800  # Initial placeholder
        self.canvas_height = 600  # Initial placeholder
        self.preview_canvas = None

        self.setup_ui()
        self.update_controls()
        self.set_info("Load a photo to begin")

    def setup_ui(self):
        # Size the canvas from the screen
        screen_width = self.root.winfo_screenwidth()
        screen_height = self.root.winfo_screenheight()
        self.canvas_width = max(400, int(screen_width * 0.6))
        self.canvas_height = max(300, int(screen_height * 0.75))

        # Menu Bar
        menubar = tk.Menu(self.root)
        self.root.config(menu=menubar)

        self.file_menu = tk.Menu(menubar, tearoff=0)
        menubar.add_cascade(label="File", menu=self.file_menu)
        self.file_menu.add_command(label="Load Image...", command=self.load_image, accelerator="Ctrl+O")
        self.file_menu.add_command(label="Export HQ", command=self.export_hq, accelerator="Ctrl+S")
        self.file_menu.add_separator()
        self.file_menu.add_command(label="Exit", command=self.root.quit, accelerator="Alt+F4")

        self.root.bind('<Control-o>', lambda e: self.load_image())
        self.root.bind('<Control-s>', lambda e: self.export_hq())

        # Toolbar
        toolbar = ttk.Frame(self.root, padding="2")
        toolbar.grid(row=0, column=0, sticky=(tk.W, tk.E))

        self.load_btn = ttk.Button(toolbar, text="Load...", command=self.load_image, width=8)
        self.load_btn.pack(side=tk.LEFT, padx=1)
        self.toggle_ui_btn = ttk.Button(toolbar, text="Hide UI", command=self.toggle_ui, width=8)
        self.toggle_ui_btn.pack(side=tk.LEFT, padx=1)
        self.reset_btn = ttk.Button(toolbar, text="Reset", command=self.reset_curve, width=8)
        self.reset_btn.pack(side=tk.LEFT, padx=1)
        self.export_btn = ttk.Button(toolbar, text="Export HQ", command=self.export_hq, width=10)
        self.export_btn.pack(side=tk.LEFT, padx=1)

        self.info_label = ttk.Label(toolbar, text="", anchor=tk.E)
        self.info_label.pack(side=tk.RIGHT, padx=10)

        # Preview canvas
        self.canvas = tk.Canvas(self.root, bg='gray', cursor="cross",
                                width=self.canvas_width, height=self.canvas_height,
                                highlightthickness=0)
        self.canvas.grid(row=1, column=0, sticky=(tk.W, tk.E, tk.N, tk.S))
        self.preview_canvas = ImageCanvas(self.canvas, self.canvas_width, self.canvas_height)

        self.canvas.bind("<Button-1>", self.on_canvas_click)
        self.canvas.bind("<B1-Motion>", self.on_canvas_drag)
        self.canvas.bind("<ButtonRelease-1>", self.on_canvas_release)
        self.canvas.bind("<Configure>", self.on_canvas_resize)

        # Status Bar at bottom
        status_frame = ttk.Frame(self.root, relief=tk.SUNKEN, padding="2")
        status_frame.grid(row=2, column=0, sticky=(tk.W, tk.E))

        self.status_label = ttk.Label(status_frame, text="", anchor=tk.W)
        self.status_label.pack(side=tk.LEFT, fill=tk.X, expand=True)

        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(1, weight=1)

    # ---------- Status helpers ----------

    def set_info(self, text):
        self.info_label.config(text=text)

    def set_status(self, text, clear_after=None):
        """Show a status message, optionally clearing it after a delay"""
        if self._status_clear_job is not None:
            self.root.after_cancel(self._status_clear_job)
            self._status_clear_job = None

        self.status_label.config(text=text)
        if clear_after:
            self._status_clear_job = self.root.after(clear_after, lambda: self.set_status(""))

    def update_controls(self):
        """Enable controls that make sense for the current state"""
        busy = self.coordinator.is_busy()
        ready = self.coordinator.has_image() and not busy

        state = tk.NORMAL if ready else tk.DISABLED
        self.toggle_ui_btn.config(state=state)
        self.reset_btn.config(state=state)
        self.export_btn.config(state=state)
        self.file_menu.entryconfig("Export HQ", state=state)

        # Loading stays available unless an export is running
        load_state = tk.DISABLED if busy else tk.NORMAL
        self.load_btn.config(state=load_state)
        self.file_menu.entryconfig("Load Image...", state=load_state)

    # ---------- File loading ----------

    def load_image(self):
        if self.coordinator.is_busy():
            return

        file_path = filedialog.askopenfilename(
            title="Select Image",
            filetypes=image_io.INPUT_FILETYPES,
        )

        if file_path:
            self.load_image_from_path(file_path)

    def load_image_from_path(self, file_path):
        """Load an image from the given file path"""
        self.set_status("Loading photo...")
        self.set_info("")
        self.root.update_idletasks()

        try:
            session = self.coordinator.load_image_from_path(file_path)
        except StripesError as e:
            logging.error(f"Load failed: {e}")
            self.set_status(f"Error: {e}")
            if self.coordinator.has_image():
                self.set_info(self.coordinator.session.get_info_text())
            return

        self.dragging_point = None
        self.show_ui = True
        self.toggle_ui_btn.config(text="Hide UI")

        self.update_controls()
        self.set_info(session.get_info_text())
        self.display_preview()
        self.set_status("Image loaded. Drag the curve points.", clear_after=STATUS_CLEAR_DELAY)

    # ---------- Drawing ----------

    def display_preview(self):
        session = self.coordinator.session
        if session is None:
            return

        if not self.show_ui:
            self.preview_canvas.display_image(session.preview_render)
            return

        image = draw_sample_markers(session.preview_render.copy(), session.preview_map)

        def draw_curve(canvas_image, image_canvas):
            draw_curve_overlay(canvas_image, image_canvas, session.curve,
                               active_index=self.dragging_point)

        self.preview_canvas.display_image(image, overlay_callback=draw_curve)

    def on_canvas_resize(self, event):
        self.preview_canvas.update_canvas_size(event.width, event.height)
        self.display_preview()

    def toggle_ui(self):
        self.show_ui = not self.show_ui
        self.toggle_ui_btn.config(text="Hide UI" if self.show_ui else "Show UI")
        self.display_preview()

    # ---------- Curve interaction ----------

    def on_canvas_click(self, event):
        if not self.coordinator.has_image():
            return

        x, y = self.preview_canvas.canvas_to_image_coords(event.x, event.y)
        self.dragging_point = self.coordinator.pick_point(x, y)
        if self.dragging_point is not None:
            self.canvas.config(cursor="hand2")
            self.display_preview()

    def on_canvas_drag(self, event):
        if self.dragging_point is None:
            return

        x, y = self.preview_canvas.canvas_to_image_coords(event.x, event.y)
        if self.coordinator.move_point(self.dragging_point, x, y):
            self.display_preview()

    def on_canvas_release(self, event):
        if self.dragging_point is not None:
            self.dragging_point = None
            self.canvas.config(cursor="cross")
            self.display_preview()

    def reset_curve(self):
        if not self.coordinator.has_image():
            return
        if self.coordinator.reset_curve():
            self.display_preview()

    # ---------- HQ export ----------

    def get_output_dir(self):
        """Directory exports are written to"""
        if self.output_dir:
            return self.output_dir
        source_path = self.coordinator.session.source_path
        if source_path:
            return os.path.dirname(os.path.abspath(source_path))
        return os.getcwd()

    def export_hq(self):
        if not self.coordinator.has_image() or self.coordinator.is_busy():
            return

        output_dir = self.get_output_dir()

        def persist(image, filename):
            image_io.save_image(image, os.path.join(output_dir, filename))

        def on_done(filename, error):
            self.export_results.put((filename, error))

        if not self.coordinator.start_export(persist, on_done):
            return

        self.dragging_point = None
        self.update_controls()
        self.set_status("Exporting HQ...")
        self.root.after(EXPORT_POLL_INTERVAL, self.poll_export)

    def poll_export(self):
        try:
            filename, error = self.export_results.get_nowait()
        except queue.Empty:
            self.root.after(EXPORT_POLL_INTERVAL, self.poll_export)
            return

        self.update_controls()
        if error is not None:
            self.set_status(f"Export failed: {error}")
        else:
            self.set_status(f"Done - saved {filename}", clear_after=STATUS_CLEAR_DELAY)


def main():
    parser = argparse.ArgumentParser(description='Bezier Stripes - Stripe effect driven by a Bezier curve')
    parser.add_argument('image', nargs='?', help='Image file to load on startup')
    parser.add_argument('--preview-max', type=int, default=PREVIEW_MAX,
                        help=f'Longest side of the preview in pixels (default: {PREVIEW_MAX})')
    parser.add_argument('--export-samples', type=int, default=EXPORT_SAMPLES,
                        help=f'Curve samples for the full-resolution export (default: {EXPORT_SAMPLES})')
    parser.add_argument('--output-dir', help='Directory for exports (default: next to the loaded image)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s %(message)s')

    if args.preview_max < 1:
        parser.error('--preview-max must be positive')
    if args.export_samples < 1:
        parser.error('--export-samples must be positive')

    root = tk.Tk()
    app = StripesGUI(root, preview_max=args.preview_max,
                     export_samples=args.export_samples, output_dir=args.output_dir)

    # Load image if provided via command line
    if args.image:
        # Ensure UI is fully initialized before loading image
        root.update_idletasks()
        app.load_image_from_path(args.image)

    root.mainloop()


if __name__ == "__main__":
    main()
