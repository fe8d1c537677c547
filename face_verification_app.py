# face_verification_app.py
# Main application window for face verification

import logging

import cv2
import numpy as np

import tkinter as tk
from tkinter import filedialog, messagebox
from PIL import Image, ImageTk

from camera_controller import CameraError
from config import CAMERA_HEIGHT, CAMERA_WIDTH, MODEL_POLL_MS
from face_models import ModelsNotReadyError
from live_match_loop import LiveMatchLoop
from reference_capture import CaptureFailedError, ImageDecodeError, NoFaceDetectedError
from verification_session import NoReferenceError, VerificationSession

logger = logging.getLogger(__name__)

REFERENCE_SIZE = (320, 240)
IMAGE_FILETYPES = [
    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.webp *.tif *.tiff"),
    ("All files", "*.*"),
]

# Errors the user is told about; anything else propagates
USER_ERRORS = (
    ModelsNotReadyError,
    CameraError,
    NoReferenceError,
    NoFaceDetectedError,
    ImageDecodeError,
    CaptureFailedError,
)


class FaceVerificationApp:
    def __init__(self, root, session: VerificationSession):
        self.root = root
        self.root.title("Face Verification")
        self.session = session
        self.state = session.state

        self.loop = LiveMatchLoop(
            session=self.session,
            schedule=self.root.after,
            render=self._show_frame,
        )

        # --- UI layout ---
        tk.Label(
            self.root,
            text="All processing happens on this computer - no images are sent to any server.",
        ).pack(side=tk.TOP, padx=5, pady=(5, 0))

        self.status_label = tk.Label(self.root, fg="#555555")
        self.status_label.pack(side=tk.TOP, padx=5)

        self.controls_frame = tk.Frame(self.root)
        self.controls_frame.pack(side=tk.TOP, fill=tk.X)

        self.upload_button = tk.Button(
            self.controls_frame,
            text="Upload Reference Photo",
            command=self.upload_reference,
        )
        self.upload_button.pack(side=tk.LEFT, padx=5, pady=5)

        self.capture_button = tk.Button(
            self.controls_frame,
            text="Take Reference Photo",
            command=self.capture_reference,
        )
        self.capture_button.pack(side=tk.LEFT, padx=5, pady=5)

        self.camera_button = tk.Button(
            self.controls_frame,
            text="Start Camera",
            command=self.toggle_camera,
            width=14,
        )
        self.camera_button.pack(side=tk.RIGHT, padx=5, pady=5)

        self.content_frame = tk.Frame(self.root)
        self.content_frame.pack(side=tk.TOP, fill=tk.BOTH, expand=True)

        reference_frame = tk.LabelFrame(self.content_frame, text="Reference Photo")
        reference_frame.pack(side=tk.LEFT, fill=tk.BOTH, padx=5, pady=5)
        self.reference_label = tk.Label(
            reference_frame,
            text="No reference photo selected",
            width=REFERENCE_SIZE[0],
            height=REFERENCE_SIZE[1],
            compound=tk.CENTER,
        )
        self.reference_label.pack(fill=tk.BOTH, expand=True)

        camera_frame = tk.LabelFrame(self.content_frame, text="Live Camera")
        camera_frame.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=5, pady=5)
        self.video_label = tk.Label(
            camera_frame,
            text="Camera is off",
            width=CAMERA_WIDTH,
            height=CAMERA_HEIGHT,
            compound=tk.CENTER,
        )
        self.video_label.pack(fill=tk.BOTH, expand=True)

        self.result_label = tk.Label(self.root, font=("TkDefaultFont", 14, "bold"))
        self.result_label.pack(side=tk.BOTTOM, fill=tk.X, pady=5)

        # Handle window close
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)

        # Blank placeholders so the labels keep pixel sizing before any image arrives
        self._set_image(self.reference_label, None)
        self._set_image(self.video_label, None)

        self.session.load_models()
        self.refresh()
        self._poll_models()

    # ---------- Models ----------

    def _poll_models(self):
        if self.session.poll_models():
            self.refresh()
            return
        self.root.after(MODEL_POLL_MS, self._poll_models)

    # ---------- Actions ----------

    def _alert(self, error: Exception):
        messagebox.showerror("Face Verification", str(error))

    def upload_reference(self):
        path = filedialog.askopenfilename(
            parent=self.root,
            title="Choose a reference photo",
            filetypes=IMAGE_FILETYPES,
        )
        if not path:
            return  # user cancelled
        try:
            self.session.upload_reference(path)
        except USER_ERRORS as e:
            self._alert(e)
        self.refresh()

    def capture_reference(self):
        try:
            self.session.capture_reference()
        except USER_ERRORS as e:
            self._alert(e)
        self.refresh()

    def toggle_camera(self):
        try:
            camera_on = self.session.toggle_camera()
        except USER_ERRORS as e:
            self._alert(e)
            camera_on = False
        if camera_on:
            self.loop.start()
        self.refresh()

    # ---------- Rendering ----------

    def _set_image(self, label: tk.Label, rgb: np.ndarray):
        if rgb is None:
            imgtk = ImageTk.PhotoImage(Image.new("RGB", (1, 1)))
        else:
            imgtk = ImageTk.PhotoImage(image=Image.fromarray(rgb))
        # Keep a reference to avoid garbage collection
        label.imgtk = imgtk
        label.configure(image=imgtk)

    def _show_frame(self, frame: np.ndarray):
        # OpenCV is BGR; convert to RGB
        self._set_image(self.video_label, cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
        self._refresh_result()

    def _show_reference(self):
        if self.state.reference_image is None:
            return
        thumb = Image.fromarray(self.state.reference_image)
        thumb.thumbnail(REFERENCE_SIZE)
        imgtk = ImageTk.PhotoImage(image=thumb)
        self.reference_label.imgtk = imgtk
        self.reference_label.configure(image=imgtk, text="")

    def _refresh_result(self):
        self.result_label.config(
            text=self.state.result_text(),
            fg="#1a7f37" if self.state.match else "#b42318",
        )

    def _status_text(self) -> str:
        if self.state.models_loading:
            return "Loading models... Please wait."
        if self.state.model_error:
            return self.state.model_error
        if self.state.reference_blurry:
            return "The reference photo looks blurry; matching may be unreliable."
        return ""

    def refresh(self):
        """Sync every widget with the session state."""
        state = self.state
        self.status_label.config(text=self._status_text())

        self.upload_button.config(state=tk.NORMAL if state.can_upload else tk.DISABLED)
        self.capture_button.config(state=tk.NORMAL if state.can_capture else tk.DISABLED)
        self.camera_button.config(
            text="Stop Camera" if state.camera_on else "Start Camera",
            state=tk.NORMAL if state.can_toggle_camera else tk.DISABLED,
        )

        self._show_reference()
        if not state.camera_on:
            self._set_image(self.video_label, None)
            self.video_label.configure(text="Camera is off")
        else:
            self.video_label.configure(text="")
        self._refresh_result()

    def on_close(self):
        # Clean up resources
        self.session.close()
        self.root.destroy()
