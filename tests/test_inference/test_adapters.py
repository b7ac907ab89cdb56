"""Tests for the inference runtime bindings."""

from types import SimpleNamespace

import numpy as np
import pytest

from espcn_live.core import AdapterNotLoadedError, Backend, InferenceError, Tensor
from espcn_live.inference import KerasAdapter, OnnxAdapter, create_adapter
from espcn_live.utils.config import ModelConfig


class FakeSession:
    """Mimics the parts of ``onnxruntime.InferenceSession`` we use."""

    def __init__(self, input_names=("input",), output_names=("output",), factor=3):
        self._inputs = [SimpleNamespace(name=n) for n in input_names]
        self._outputs = [SimpleNamespace(name=n) for n in output_names]
        self.factor = factor
        self.calls = []

    def get_inputs(self):
        return self._inputs

    def get_outputs(self):
        return self._outputs

    def run(self, output_names, feed):
        self.calls.append((output_names, feed))
        (x,) = feed.values()
        y = np.repeat(np.repeat(x, self.factor, axis=2), self.factor, axis=3)
        return [y * 2.0]


def _input(h=2, w=3, value=0.25) -> Tensor:
    return Tensor(data=np.full(h * w, value), shape=(1, 1, h, w))


class TestOnnxAdapter:
    def test_infer(self):
        session = FakeSession()
        adapter = OnnxAdapter(session=session)
        adapter.load()

        result = adapter.infer(_input())

        assert result.shape == (1, 1, 6, 9)
        # No clipping in this binding: 0.25 * 2
        np.testing.assert_allclose(result.data, 0.5)
        output_names, feed = session.calls[0]
        assert output_names == ["output"]
        assert list(feed) == ["input"]
        assert feed["input"].dtype == np.float32
        assert feed["input"].shape == (1, 1, 2, 3)

    def test_uses_first_input_name(self):
        adapter = OnnxAdapter(session=FakeSession(input_names=("x", "y")))
        adapter.load()
        assert adapter.input_name == "x"

    def test_unknown_input_name(self):
        adapter = OnnxAdapter(input_name="missing", session=FakeSession())
        with pytest.raises(InferenceError):
            adapter.load()
        assert not adapter.is_loaded

    def test_output_name_falls_back(self):
        adapter = OnnxAdapter(session=FakeSession(output_names=("sr",)))
        adapter.load()
        assert adapter.output_name == "sr"

    def test_missing_model_file(self, tmp_path):
        adapter = OnnxAdapter(model_path=str(tmp_path / "nope.onnx"))
        with pytest.raises(InferenceError, match="not found"):
            adapter.load()

    def test_infer_before_load(self):
        adapter = OnnxAdapter(session=FakeSession())
        with pytest.raises(AdapterNotLoadedError):
            adapter.infer(_input())

    def test_runtime_error_wrapped(self):
        session = FakeSession()
        session.run = lambda *a: (_ for _ in ()).throw(RuntimeError("bad shape"))
        adapter = OnnxAdapter(session=session)
        adapter.load()
        with pytest.raises(InferenceError, match="bad shape"):
            adapter.infer(_input())


class TestKerasAdapter:
    def test_channels_first_and_clipping(self):
        seen = {}

        def model(x, training=False):
            seen["shape"] = x.shape
            seen["training"] = training
            return np.repeat(np.repeat(x, 2, axis=2), 2, axis=3) * 10 - 3

        adapter = KerasAdapter(model=model)
        adapter.load()
        result = adapter.infer(_input(value=0.25))

        assert seen == {"shape": (1, 1, 2, 3), "training": False}
        assert result.shape == (1, 1, 4, 6)
        # 0.25 * 10 - 3 = -0.5 -> clipped to 0
        np.testing.assert_array_equal(result.data, 0.0)

    def test_channels_last(self):
        seen = {}

        def model(x, training=False):
            seen["shape"] = x.shape
            return x

        adapter = KerasAdapter(model=model, data_format="channels_last")
        adapter.load()
        result = adapter.infer(_input(h=2, w=5, value=0.3))

        assert seen["shape"] == (1, 2, 5, 1)
        assert result.shape == (1, 1, 2, 5)
        np.testing.assert_allclose(result.data, 0.3, rtol=1e-6)

    def test_multichannel_output_rejected(self):
        adapter = KerasAdapter(model=lambda x, training=False: np.zeros((1, 3, 4, 4)))
        adapter.load()
        with pytest.raises(InferenceError):
            adapter.infer(_input())

    def test_bad_data_format(self):
        with pytest.raises(ValueError):
            KerasAdapter(model_path="m.keras", data_format="nchw")

    def test_missing_model_file(self, tmp_path):
        adapter = KerasAdapter(model_path=str(tmp_path / "nope.keras"))
        with pytest.raises(InferenceError, match="not found"):
            adapter.load()

    @pytest.mark.runtime
    def test_real_keras_model(self, tmp_path):
        tf = pytest.importorskip("tensorflow")
        model = tf.keras.Sequential([
            tf.keras.Input(shape=(None, None, 1)),
            tf.keras.layers.UpSampling2D(size=2),
        ])
        path = tmp_path / "upsample.keras"
        model.save(path)

        adapter = KerasAdapter(model_path=str(path), data_format="channels_last")
        adapter.load()
        result = adapter.infer(_input(h=3, w=4, value=0.5))

        assert result.shape == (1, 1, 6, 8)
        np.testing.assert_allclose(result.data, 0.5)


class TestCreateAdapter:
    def test_onnx(self):
        adapter = create_adapter(ModelConfig(backend="onnx", path="m.onnx",
                                             providers=["CPUExecutionProvider"]))
        assert isinstance(adapter, OnnxAdapter)
        assert adapter.model_path == "m.onnx"
        assert adapter.providers == ["CPUExecutionProvider"]
        assert not adapter.is_loaded

    def test_tensorflow(self):
        adapter = create_adapter(ModelConfig(backend=Backend.TENSORFLOW,
                                             path="m.keras",
                                             data_format="channels_last"))
        assert isinstance(adapter, KerasAdapter)
        assert adapter.data_format == "channels_last"

    def test_unknown_backend(self):
        config = ModelConfig.model_construct(backend="caffe", path="m")
        with pytest.raises(ValueError):
            create_adapter(config)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
