# test_face_models.py
"""Tests for the background ModelLoader."""

import os
import shutil
import tempfile
import unittest

from config import MODEL_FILES
from face_models import FaceModels, ModelLoader, ModelLoadError, resolve_model_paths


class TestModelLoader(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.loaded_paths = []

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_model_files(self, names=None):
        for name in names if names is not None else MODEL_FILES.values():
            with open(os.path.join(self.temp_dir, name), "wb") as f:
                f.write(b"\0")

    def _fake_load(self, paths):
        self.loaded_paths.append(paths)
        return FaceModels(detector=object(), shape_predictor=object(), encoder=object())

    def _run_loader(self, loader):
        loader.start()
        loader.join(timeout=5)

    def test_poll_before_start_is_pending(self):
        loader = ModelLoader(model_dir=self.temp_dir, load_fn=self._fake_load)
        self.assertIsNone(loader.poll())
        self.assertFalse(loader.ready)

    def test_loads_all_three_models(self):
        self._write_model_files()
        loader = ModelLoader(model_dir=self.temp_dir, load_fn=self._fake_load)
        self._run_loader(loader)

        models = loader.poll()
        self.assertIsInstance(models, FaceModels)
        self.assertTrue(loader.ready)
        self.assertEqual(set(self.loaded_paths[0]), {"detector", "landmarks", "recognition"})
        # Subsequent polls return the same instance
        self.assertIs(loader.poll(), models)

    def test_missing_file_fails_without_loading(self):
        self._write_model_files(names=list(MODEL_FILES.values())[:2])
        loader = ModelLoader(model_dir=self.temp_dir, load_fn=self._fake_load)
        self._run_loader(loader)

        with self.assertRaises(ModelLoadError) as ctx:
            loader.poll()
        self.assertIn(MODEL_FILES["recognition"], str(ctx.exception))
        self.assertFalse(loader.ready)
        self.assertEqual(self.loaded_paths, [])

        # Not retried: the same error is reported again
        with self.assertRaises(ModelLoadError):
            loader.poll()

    def test_load_exception_is_wrapped(self):
        self._write_model_files()

        def broken_load(paths):
            raise RuntimeError("corrupt model")

        loader = ModelLoader(model_dir=self.temp_dir, load_fn=broken_load)
        self._run_loader(loader)

        with self.assertRaises(ModelLoadError) as ctx:
            loader.poll()
        self.assertIn("corrupt model", str(ctx.exception))
        self.assertFalse(loader.ready)

    def test_start_twice_spawns_one_thread(self):
        self._write_model_files()
        loader = ModelLoader(model_dir=self.temp_dir, load_fn=self._fake_load)
        loader.start()
        loader.start()
        loader.join(timeout=5)
        self.assertEqual(len(self.loaded_paths), 1)

    def test_hog_detector_needs_no_detector_file(self):
        self._write_model_files(
            names=[MODEL_FILES["landmarks"], MODEL_FILES["recognition"]]
        )
        paths = resolve_model_paths(self.temp_dir, detector_model="hog")
        self.assertEqual(set(paths), {"landmarks", "recognition"})

        loader = ModelLoader(
            model_dir=self.temp_dir, detector_model="hog", load_fn=self._fake_load
        )
        self._run_loader(loader)
        self.assertIsInstance(loader.poll(), FaceModels)

        with self.assertRaises(ModelLoadError):
            resolve_model_paths(self.temp_dir, detector_model="cnn")

    def test_unknown_detector_model(self):
        self._write_model_files()
        with self.assertRaises(ModelLoadError):
            resolve_model_paths(self.temp_dir, detector_model="tiny")

    def test_resolve_model_paths(self):
        self._write_model_files()
        paths = resolve_model_paths(self.temp_dir)
        self.assertEqual(
            paths["landmarks"],
            os.path.join(self.temp_dir, MODEL_FILES["landmarks"]),
        )


if __name__ == "__main__":
    unittest.main()
