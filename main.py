# main.py
import argparse
import logging
import tkinter as tk

from camera_controller import CameraController
from config import CAMERA_INDEX, DETECTOR_MODEL
from face_models import ModelLoader
from face_verification_app import FaceVerificationApp
from verification_session import VerificationSession


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Verify live webcam faces against a reference photo.")
    parser.add_argument("--camera-index", type=int, default=CAMERA_INDEX, help="webcam device index")
    parser.add_argument(
        "--model-dir",
        default=None,
        help="directory holding the dlib model files (defaults to face_recognition_models)",
    )
    parser.add_argument(
        "--detector",
        choices=("cnn", "hog"),
        default=DETECTOR_MODEL,
        help="face detector: cnn is more accurate, hog is much faster on CPU",
    )
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    session = VerificationSession(
        camera=CameraController(camera_index=args.camera_index),
        loader=ModelLoader(model_dir=args.model_dir, detector_model=args.detector),
    )

    root = tk.Tk()
    app = FaceVerificationApp(root, session)
    root.mainloop()


if __name__ == "__main__":
    main()
