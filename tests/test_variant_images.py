from app.services.variant_images import (
    VariantKey,
    candidate_keys,
    generate_key,
    parse_variant_images,
    resolve,
    set_variant_images,
)


def test_empty_variant_images_fall_back_to_base():
    assert resolve({}, ["a", "b"], {"size": "L"}) == ["a", "b"]
    assert resolve(None, None, {"size": "L"}) == []


def test_full_combination_wins_case_insensitively():
    variant_images = {"size:l,color:red": ["x"], "default": ["y"]}
    assert resolve(variant_images, [], {"size": "L", "color": "Red"}) == ["x"]
    assert resolve(variant_images, [], {}) == ["y"]


def test_stored_keys_match_regardless_of_pair_order():
    assert resolve({"color:Red,size:L": ["x"]}, [], {"size": "l", "color": "red"}) == ["x"]
    assert resolve({"size:L,color:Red": ["x"]}, [], {"color": "Red", "size": "L"}) == ["x"]


def test_single_axis_beats_base_images():
    assert resolve({"color:red": ["x"]}, ["z"], {"size": "L", "color": "Red"}) == ["x"]


def test_single_axes_are_tried_in_selection_order():
    variant_images = {"size:l": ["by-size"], "color:red": ["by-color"]}
    assert resolve(variant_images, [], {"size": "L", "color": "Red"}) == ["by-size"]
    assert resolve(variant_images, [], {"color": "Red", "size": "L"}) == ["by-color"]


def test_default_used_when_no_axis_matches():
    variant_images = {"color:blue": ["blue"], "default": ["fallback"]}
    assert resolve(variant_images, ["base"], {"color": "Red"}) == ["fallback"]


def test_empty_image_lists_are_treated_as_absent():
    variant_images = {"color:red,size:l": [], "color:red": [], "default": ["d"]}
    assert resolve(variant_images, ["base"], {"size": "L", "color": "Red"}) == ["d"]
    assert resolve({"default": []}, ["base"], {"color": "Red"}) == ["base"]


def test_empty_selection_values_are_ignored():
    variant_images = {"color:red": ["x"]}
    assert resolve(variant_images, ["base"], {"size": "", "color": "Red", "frame": None}) == ["x"]


def test_resolve_returns_a_copy():
    variant_images = {"default": ["d"]}
    images = resolve(variant_images, [], {})
    images.append("extra")
    assert variant_images["default"] == ["d"]


def test_generate_key_is_order_independent():
    assert generate_key({"color": "Red", "size": "L"}) == generate_key({"size": "L", "color": "Red"})
    assert generate_key({"size": "L", "color": "Red"}) == "color:Red,size:L"


def test_generate_key_for_empty_selection_is_default():
    assert generate_key({}) == "default"
    assert generate_key({"size": None, "color": ""}) == "default"


def test_candidate_keys_order():
    keys = [str(key) for key in candidate_keys({"size": "L", "color": "Red"})]
    assert keys == ["color:Red,size:L", "size:L", "color:Red", "default"]
    assert [str(key) for key in candidate_keys({})] == ["default"]


def test_variant_keys_compare_case_insensitively():
    assert VariantKey.from_selection({"Color": "RED"}) == VariantKey.single("color", "red")
    assert VariantKey.default().is_default


def test_parse_variant_images_accepts_json_strings_and_mappings():
    assert parse_variant_images('{"default": ["a"]}') == {"default": ["a"]}
    assert parse_variant_images({"size:L": ["b"]}) == {"size:L": ["b"]}
    assert parse_variant_images("not json") == {}
    assert parse_variant_images(None) == {}
    assert parse_variant_images(["a"]) == {}


def test_set_variant_images_replaces_existing_key_regardless_of_case():
    current = {"color:red,size:l": ["old"], "default": ["d"]}
    updated = set_variant_images(current, {"size": "L", "color": "Red"}, ["new"])

    assert updated == {"color:Red,size:L": ["new"], "default": ["d"]}
    assert current["color:red,size:l"] == ["old"]


def test_set_variant_images_with_no_images_removes_key():
    updated = set_variant_images({"color:Red": ["x"], "default": ["d"]}, {"color": "red"}, [])
    assert updated == {"default": ["d"]}


def test_unparseable_stored_keys_still_match_case_insensitively():
    assert resolve({"DEFAULT": ["d"]}, [], {"color": "Red"}) == ["d"]
    assert resolve({"legacy-key": ["x"], "default": ["d"]}, [], {}) == ["d"]


def test_parse_key():
    assert VariantKey.parse("size:L,color:Red") == VariantKey.from_selection({"color": "red", "size": "l"})
    assert str(VariantKey.parse("size:L,color:Red")) == "color:Red,size:L"
    assert VariantKey.parse("default").is_default
    assert VariantKey.parse("legacy-key") is None


def test_generate_key_sorts_axes_ignoring_case():
    assert generate_key({"Size": "L", "color": "Red"}) == "color:Red,Size:L"
    assert str(VariantKey.parse("Size:L,color:Red")) == "color:Red,Size:L"


def test_parse_variant_images_repairs_malformed_image_values():
    stored = {"default": "https://x/a.webp", "size:L": None, "color:Red": 42, "color:Blue": ["b", 7]}

    assert parse_variant_images(stored) == {
        "default": ["https://x/a.webp"],
        "size:L": [],
        "color:Red": [],
        "color:Blue": ["b"],
    }
    assert resolve(stored, ["base"], {"size": "M"}) == ["https://x/a.webp"]
