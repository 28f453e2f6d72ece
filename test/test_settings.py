"""Tests for the ColorSettings model."""

from presets import (
    HUE_CHANNEL_NAMES,
    IDENTITY_CURVE,
    ColorGrading,
    ColorSettings,
    HueChannels,
    ToneCurves,
    is_identity_curve,
)


class TestDefaults:
    """Tests for the all-neutral default settings."""

    def test_default_is_neutral(self):
        settings = ColorSettings()
        assert settings.is_neutral()
        assert settings.changed_fields() == {}

    def test_blending_defaults_to_fifty(self):
        """Blending is the only grading value with a non-zero neutral."""
        assert ColorGrading().blending == 50.0

    def test_default_curves_are_identity(self):
        curves = ToneCurves()
        for points in (curves.rgb, curves.red, curves.green, curves.blue):
            assert points == list(IDENTITY_CURVE)

    def test_hue_channels_fixed_order(self):
        assert HUE_CHANNEL_NAMES == (
            "red",
            "orange",
            "yellow",
            "green",
            "aqua",
            "blue",
            "purple",
            "magenta",
        )
        channels = HueChannels(orange=5.0, magenta=-3.0)
        assert channels.values() == [0.0, 5.0, 0.0, 0.0, 0.0, 0.0, 0.0, -3.0]

    def test_default_curves_not_shared(self):
        """Each instance gets its own curve lists."""
        a = ToneCurves()
        b = ToneCurves()
        a.rgb.append((128.0, 140.0))
        assert b.rgb == list(IDENTITY_CURVE)


class TestIdentityCurve:
    """Tests for is_identity_curve."""

    def test_identity(self):
        assert is_identity_curve([(0, 0), (255, 255)])
        assert is_identity_curve([(0.0, 0.0), (255.0, 255.0)])

    def test_extra_point_is_not_identity(self):
        """Three collinear points still count as an edited curve."""
        assert not is_identity_curve([(0, 0), (128, 128), (255, 255)])

    def test_moved_endpoint_is_not_identity(self):
        assert not is_identity_curve([(0, 10), (255, 255)])
        assert not is_identity_curve([(0, 0), (250, 255)])


class TestChangedFields:
    """Tests for the dotted-path analysis of non-default fields."""

    def test_reports_nested_paths(self):
        settings = ColorSettings(exposure=0.5)
        settings.hsl.saturation.blue = -30.0
        settings.color_grading.shadow_hue = 220.0
        settings.calibration.red_hue = 10.0

        changed = settings.changed_fields()
        assert changed == {
            "exposure": 0.5,
            "hsl.saturation.blue": -30.0,
            "color_grading.shadow_hue": 220.0,
            "calibration.red_hue": 10.0,
        }

    def test_reports_edited_curves(self):
        settings = ColorSettings()
        settings.tone_curve.blue = [(0.0, 20.0), (255.0, 255.0)]
        assert settings.changed_fields() == {
            "tone_curve.blue": [(0.0, 20.0), (255.0, 255.0)]
        }

    def test_grayscale_flag(self):
        settings = ColorSettings(convert_to_grayscale=True)
        assert settings.changed_fields() == {"convert_to_grayscale": True}
        assert not settings.is_neutral()

    def test_blending_at_default_not_reported(self):
        settings = ColorSettings()
        settings.color_grading.blending = 50.0
        assert settings.is_neutral()


class TestSerialization:
    """Tests for dict conversion and copying."""

    def test_dict_roundtrip(self):
        settings = ColorSettings(contrast=20.0, convert_to_grayscale=True)
        settings.gray_mixer.red = 40.0
        settings.tone_curve.rgb = [(0.0, 10.0), (128.0, 140.0), (255.0, 245.0)]

        restored = ColorSettings.from_dict(settings.to_dict())
        assert restored == settings

    def test_from_dict_tolerates_unknown_and_missing_keys(self):
        settings = ColorSettings.from_dict(
            {"exposure": "1.5", "unknown": 3, "hsl": {"hue": {"red": 10}}}
        )
        assert settings.exposure == 1.5
        assert settings.hsl.hue.red == 10.0
        assert settings.contrast == 0.0
        assert settings.color_grading.blending == 50.0

    def test_from_dict_short_curve_falls_back_to_identity(self):
        settings = ColorSettings.from_dict({"tone_curve": {"red": [[10, 20]]}})
        assert settings.tone_curve.red == list(IDENTITY_CURVE)

    def test_from_dict_curve_points_become_float_pairs(self):
        """JSON gives curve points back as lists."""
        settings = ColorSettings.from_dict(
            {"tone_curve": {"rgb": [[0, 5], [255, 250]]}}
        )
        assert settings.tone_curve.rgb == [(0.0, 5.0), (255.0, 250.0)]

    def test_copy_is_deep(self):
        settings = ColorSettings()
        clone = settings.copy()
        clone.hsl.hue.red = 15.0
        clone.tone_curve.rgb.append((128.0, 150.0))

        assert settings.hsl.hue.red == 0.0
        assert settings.tone_curve.rgb == list(IDENTITY_CURVE)
