import os
import tempfile
import unittest
from unittest import mock

from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

from s3client import completer
from s3client.completer import Candidate, CompletionProvider, S3ClientCompleter, quote_arg

from tests.fakes import write_file
from tests.test_commands import make_app


def texts(candidates):
    return [c.text for c in candidates]


class CompletionProviderTests(unittest.TestCase):
    def setUp(self):
        self.app = make_app()
        self.provider = CompletionProvider(self.app)

    def test_verbs(self):
        self.assertEqual(texts(self.provider.candidates(['rm'], 0, 'rm')), ['rm', 'rmbucket'])

    def test_help_completes_verbs(self):
        self.assertIn('touch', texts(self.provider.candidates(['help', 't'], 1, 't')))

    def test_directories_only_for_cd(self):
        candidates = self.provider.candidates(['cd', ''], 1, '')
        self.assertEqual(candidates, [
            Candidate('docs/', 'docs/', terminal=False),
            Candidate('photos/', 'photos/', terminal=False),
        ])

    def test_files_and_directories_for_cat(self):
        self.assertEqual(texts(self.provider.candidates(['cat', ''], 1, '')), ['docs/', 'photos/', 'readme.txt'])
        self.assertEqual(texts(self.provider.candidates(['cat', 'docs/g'], 1, 'docs/g')), ['docs/guide.md'])

    def test_relative_to_working_prefix(self):
        self.app.session.prefix = 'docs/'
        self.assertEqual(texts(self.provider.candidates(['cd', ''], 1, '')), ['api/'])
        self.assertEqual(texts(self.provider.candidates(['cat', 'g'], 1, 'g')), ['guide.md'])

    def test_absolute_partial(self):
        self.app.session.prefix = 'docs/'
        self.assertEqual(texts(self.provider.candidates(['cd', '/ph'], 1, '/ph')), ['/photos/'])

    def test_buckets_at_root(self):
        self.app.session.reset()
        self.assertEqual(texts(self.provider.candidates(['cd', ''], 1, '')), ['data', 'empty'])
        self.assertEqual(texts(self.provider.candidates(['enter', 'e'], 1, 'e')), ['empty'])

    def test_choices(self):
        self.assertEqual(texts(self.provider.candidates(['rm', 'docs', ''], 2, '')), ['-r'])
        self.assertEqual(texts(self.provider.candidates(['list', 'e'], 1, 'e')), ['env'])

    def test_no_candidates_past_last_argument(self):
        self.assertEqual(self.provider.candidates(['pwd', ''], 1, ''), [])
        self.assertEqual(self.provider.candidates(['unknown', ''], 1, ''), [])

    def test_store_errors_yield_nothing(self):
        self.app.session.bucket = 'vanished'
        self.assertEqual(self.provider.candidates(['cat', ''], 1, ''), [])

    def test_truncated_listing_is_closed(self):
        store = self.app.session.store
        with mock.patch.object(completer, 'MAX_REMOTE_CANDIDATES', 1):
            candidates = self.provider.candidates(['cat', ''], 1, '')
        self.assertEqual(texts(candidates), ['docs/'])
        self.assertEqual(len(store.listings), 1)
        self.assertEqual(store.open_listings, [])

    def test_local_paths(self):
        with tempfile.TemporaryDirectory() as tmp:
            write_file(os.path.join(tmp, 'alpha.txt'))
            write_file(os.path.join(tmp, 'album', 'x.txt'))
            partial = os.path.join(tmp, 'al')
            candidates = self.provider.candidates(['ul', partial], 1, partial)
        self.assertEqual(candidates, [
            Candidate(os.path.join(tmp, 'album') + os.sep, 'album' + os.sep, terminal=False),
            Candidate(os.path.join(tmp, 'alpha.txt'), 'alpha.txt'),
        ])


class CompleterTests(unittest.TestCase):
    def complete(self, app, text):
        completer = S3ClientCompleter(CompletionProvider(app))
        return list(completer.get_completions(Document(text), CompleteEvent()))

    def test_quote_arg(self):
        self.assertEqual(quote_arg('my dir/'), 'my\\ dir/')
        self.assertEqual(quote_arg("it's"), "it\\'s")

    def test_verb_gets_trailing_space(self):
        completions = self.complete(make_app(), 'tou')
        self.assertEqual([(c.text, c.start_position) for c in completions], [('touch ', -3)])

    def test_directory_has_no_trailing_space(self):
        completions = self.complete(make_app(), 'cd do')
        self.assertEqual([(c.text, c.start_position) for c in completions], [('docs/', -2)])

    def test_new_argument_after_space(self):
        completions = self.complete(make_app(prefix='docs/'), 'cat ')
        self.assertEqual([(c.text, c.start_position) for c in completions], [('api/', 0), ('guide.md ', 0)])

    def test_names_with_spaces_are_escaped(self):
        app = make_app()
        app.session.store.buckets['data']['my files/a.txt'] = b''
        completions = self.complete(app, 'cd my')
        self.assertEqual([c.text for c in completions], ['my\\ files/'])


if __name__ == '__main__':
    unittest.main()
