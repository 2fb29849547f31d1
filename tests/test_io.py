import bz2
import gzip
import lzma
from io import BytesIO

import pytest

from idmatrix.containers import DuplicateLabelError
from idmatrix.containers.matrix import IdentityMatrix
from idmatrix.containers.scores import Hit
from idmatrix.io import ParserError, MatrixFormatError, TreeFormatError, DataFile
from idmatrix.io.newick import parse_leaf_order, read_leaf_order, NewickReader
from idmatrix.io.seq import LabelReader, read_labels
from idmatrix.io.tabular import BlastReader, MatrixReader, read_hits, read_matrix, write_matrix


class TestLabelReader:
    def test_label_truncated_at_whitespace(self):
        assert list(LabelReader(BytesIO(b'>seqA desc text\nACGT...\n'))) == [b'seqA']

    def test_tab_in_header(self):
        assert list(LabelReader(BytesIO(b'>seqA\tdesc\nAC\n>seqB  x\nGT\n'))) == [b'seqA', b'seqB']

    def test_order_and_preamble(self):
        data = b'ignored line\n>c\nAAA\n>a\n>b x\nCC\nGG\n'
        assert list(LabelReader(BytesIO(data))) == [b'c', b'a', b'b']

    def test_gt_inside_sequence_line_is_not_a_header(self):
        assert list(LabelReader(BytesIO(b'>a\nAC>GT\n'))) == [b'a']

    def test_crlf(self):
        assert list(LabelReader(BytesIO(b'>a desc\r\nAC\r\n>b\r\n'))) == [b'a', b'b']

    def test_empty_header(self):
        with pytest.raises(ParserError, match=':3: Header has no label') as e:
            list(LabelReader(BytesIO(b'>a\nAC\n>  \nGT\n'), name='genomes.fna'))
        assert e.value.line == 3
        assert e.value.source == 'genomes.fna'

    def test_read_labels_duplicates(self, write):
        with pytest.raises(DuplicateLabelError, match="'a'"):
            read_labels(write('dupes.fna', b'>a\nA\n>b\nC\n>a x\nG\n'))

    def test_read_labels_gzip(self, tmp_path):
        path = tmp_path / 'genomes.fna.gz'
        with gzip.open(path, 'wb') as f: f.write(b'>a\nACGT\n>b\nTT\n')
        assert read_labels(path) == (b'a', b'b')

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_labels(tmp_path / 'missing.fna')


class TestBlastReader:
    def test_parse(self):
        data = b'A\tB\t98.50\t1200\t3\t0\t1\t1200\t1\t1200\t0.0\t2000\n'
        assert list(BlastReader(BytesIO(data))) == [Hit(b'A', b'B', 98.5, 1200)]

    def test_comments_and_blank_lines(self):
        data = b'# BLASTN 2.14.0+\n# Fields: query acc.ver\n\nA\tB\t90\t10\n\n'
        assert [tuple(h) for h in BlastReader(BytesIO(data))] == [(b'A', b'B', 90.0, 10)]

    def test_too_few_fields(self):
        with pytest.raises(ParserError, match='at least 4') as e:
            list(BlastReader(BytesIO(b'A\tB\t90\t10\nA\tB\t90\n')))
        assert e.value.line == 2

    def test_non_numeric_identity(self):
        with pytest.raises(ParserError, match='Identity'):
            list(BlastReader(BytesIO(b'A\tB\thigh\t10\n')))

    def test_nan_identity(self):
        with pytest.raises(ParserError, match='Identity'):
            list(BlastReader(BytesIO(b'A\tB\tnan\t10\n')))

    @pytest.mark.parametrize('length', [b'ten', b'-5', b'10.5'])
    def test_bad_length(self, length):
        with pytest.raises(ParserError, match='Alignment length'):
            list(BlastReader(BytesIO(b'A\tB\t90\t' + length + b'\n')))

    def test_read_hits_bz2(self, tmp_path):
        path = tmp_path / 'hits.tsv.bz2'
        with bz2.open(path, 'wb') as f: f.write(b'A\tB\t90\t10\nB\tA\t80\t12\n')
        assert read_hits(path) == [Hit(b'A', b'B', 90.0, 10), Hit(b'B', b'A', 80.0, 12)]

    def test_truncated_gzip(self, tmp_path):
        path = tmp_path / 'hits.tsv.gz'
        data = gzip.compress(b''.join(b'A%d\tB\t90\t10\n' % i for i in range(2000)))
        path.write_bytes(data[:len(data) // 2])
        with pytest.raises(ParserError, match='corrupt or truncated') as e:
            read_hits(path)
        assert e.value.source == str(path)

    def test_truncated_xz_stream(self):
        data = lzma.compress(b'A\tB\t90\t10\n' * 500)
        with pytest.raises(ParserError, match='corrupt or truncated'):
            read_hits(BytesIO(data[:len(data) // 2]))


class TestNewick:
    def test_sample(self):
        order = parse_leaf_order(b"(('a':0,'b':0):190.2,'c':164.5);")
        assert order.labels == (b'a', b'b', b'c')

    def test_long_sample(self):
        text = (b"(('a':0,'b':0):190.2486,('c':164.5815,('d':130.3324,('e':117.1488,('G':107.2966,"
                b"('f':99.37408,('g':94.174,('h':17.81668,'i':17.81668):76.35732):5.200086):7.922551)"
                b":9.852154):13.18362):34.24904):25.66714);")
        assert parse_leaf_order(text).labels == (b'a', b'b', b'c', b'd', b'e', b'G', b'f', b'g', b'h', b'i')

    def test_unquoted_and_whitespace(self):
        assert parse_leaf_order('( A:1 , (B:2,C) :3 ) ;').labels == (b'A', b'B', b'C')

    def test_duplicates_keep_first_index(self):
        order = parse_leaf_order(b'(a,(b,a),c);')
        assert order.labels == (b'a', b'b', b'c')
        assert order.index(b'c') == 2

    def test_branch_lengths_only_are_skipped(self):
        order = parse_leaf_order(b'((a:1,b:2):0.5,:3);')
        assert b'' not in order
        assert len(order) == 2

    def test_first_line_only(self, write):
        assert read_leaf_order(write('t.dnd', b'(a,b);\n(c,d);\n')).labels == (b'a', b'b')

    def test_empty_tree(self):
        with pytest.raises(TreeFormatError, match='No leaf labels'):
            NewickReader(BytesIO(b'();\n')).read()

    def test_empty_file(self):
        with pytest.raises(TreeFormatError):
            NewickReader(BytesIO(b'')).read()


class TestMatrixIO:
    CONTENT = b'\ta\tb\na\t100.00\t85.00\nb\t85.00\t100.00\n'

    def test_read(self):
        m = MatrixReader(BytesIO(self.CONTENT)).read()
        assert m.labels == (b'a', b'b')
        assert m.corner == b''
        assert m[b'a', b'b'] == b'85.00'

    def test_write_round_trip(self, tmp_path):
        path = tmp_path / 'm.tsv'
        write_matrix(read_matrix(BytesIO(self.CONTENT)), path)
        assert path.read_bytes() == self.CONTENT

    def test_compressed_output(self, tmp_path):
        path = tmp_path / 'm.tsv.xz'
        m = IdentityMatrix([b'a'], [[b'1.00']], corner=b'id')
        write_matrix(m, path)
        assert lzma.decompress(path.read_bytes()) == b'id\ta\na\t1.00\n'
        assert read_matrix(path) == m

    def test_crlf_and_trailing_blank(self):
        m = read_matrix(BytesIO(b'\ta\r\na\t1.00\r\n\r\n'))
        assert m[b'a', b'a'] == b'1.00'

    def test_empty(self):
        with pytest.raises(MatrixFormatError, match='empty'):
            read_matrix(BytesIO(b''))

    def test_wrong_cell_count(self):
        with pytest.raises(MatrixFormatError, match='Expected 2 cells') as e:
            read_matrix(BytesIO(b'\ta\tb\na\t1\t2\nb\t2\n'))
        assert e.value.line == 3

    def test_missing_row(self):
        with pytest.raises(MatrixFormatError, match='Expected 2 rows'):
            read_matrix(BytesIO(b'\ta\tb\na\t1\t2\n'))

    def test_extra_row(self):
        with pytest.raises(MatrixFormatError, match='More rows'):
            read_matrix(BytesIO(b'\ta\na\t1\na\t1\n'))

    def test_row_label_mismatch(self):
        with pytest.raises(MatrixFormatError, match="'c'"):
            read_matrix(BytesIO(b'\ta\tb\na\t1\t2\nc\t2\t1\n'))

    def test_duplicate_header(self):
        with pytest.raises(MatrixFormatError, match='Duplicate'):
            read_matrix(BytesIO(b'\ta\ta\na\t1\t2\na\t2\t1\n'))

    def test_data_file_writer(self, tmp_path):
        path = tmp_path / 'm.tsv'
        with DataFile.writer(path, 'matrix') as w: w.write(read_matrix(BytesIO(self.CONTENT)))
        assert path.read_bytes() == self.CONTENT
