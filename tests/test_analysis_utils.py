import unittest

from exceptions import UpstreamError
from utils.analysis_utils import parse_model_json, response_text, strip_code_fences


class TestAnalysisUtils(unittest.TestCase):

    def test_strip_code_fences(self):
        self.assertEqual(strip_code_fences('```json\n{"a": 1}\n```'), '{"a": 1}')
        self.assertEqual(strip_code_fences('{"a": 1}'), '{"a": 1}')

    def test_parse_model_json_plain_and_embedded(self):
        self.assertEqual(parse_model_json('{"a": 1}'), {"a": 1})
        self.assertEqual(parse_model_json('Here you go: {"a": [1, 2]} hope it helps'), {"a": [1, 2]})

    def test_parse_model_json_rejects_empty_and_garbage(self):
        for raw in (None, "", "   ", "no json here", "{broken"):
            with self.subTest(raw=raw):
                with self.assertRaises(UpstreamError):
                    parse_model_json(raw)

    def test_response_text_flattens_parts(self):
        self.assertEqual(response_text("abc"), "abc")
        self.assertEqual(response_text(["{\"a\":", {"type": "text", "text": " 1}"}]), '{"a": 1}')
        self.assertIsNone(response_text(None))


if __name__ == '__main__':
    unittest.main()
