import ast
import unittest

import sexpy_lang
from sexpy_lang import EmitError, SexpFloat, SexpInt, SexpList, SexpString, SexpSymbol


def py(source: str) -> str:
    return sexpy_lang.compile_source(source)


class LeafEmissionTests(unittest.TestCase):
    def test_absent_node_and_empty_list_are_none(self) -> None:
        self.assertEqual(sexpy_lang.emit(None), "None")
        self.assertEqual(sexpy_lang.emit(SexpList(())), "None")
        self.assertEqual(py(""), "None")

    def test_literals(self) -> None:
        self.assertEqual(sexpy_lang.emit(SexpInt(-12)), "-12")
        self.assertEqual(sexpy_lang.emit(SexpFloat(2.5)), "2.5")
        self.assertEqual(sexpy_lang.emit(SexpSymbol("total")), "total")

    def test_non_finite_floats(self) -> None:
        self.assertEqual(sexpy_lang.emit(SexpFloat(float("inf"))), "float('inf')")
        self.assertEqual(sexpy_lang.emit(SexpFloat(float("-inf"))), "-float('inf')")
        self.assertEqual(sexpy_lang.emit(SexpFloat(float("nan"))), "float('nan')")

    def test_string_is_reescaped(self) -> None:
        text = sexpy_lang.emit(SexpString('say "hi"\n\tback\\slash'))
        self.assertEqual(text, '"say \\"hi\\"\\n\\tback\\\\slash"')
        self.assertEqual(ast.literal_eval(text), 'say "hi"\n\tback\\slash')

    def test_control_characters_are_escaped(self) -> None:
        text = sexpy_lang.emit(SexpString("a\x00b\rc"))
        self.assertEqual(text, '"a\\x00b\\rc"')

    def test_leaf_emission_is_stable(self) -> None:
        for node in (SexpInt(3), SexpFloat(0.1), SexpString("x"), SexpSymbol("y")):
            self.assertEqual(sexpy_lang.emit(node), sexpy_lang.emit(node))

    def test_constants_and_keywords(self) -> None:
        self.assertEqual(py("nil"), "None")
        self.assertEqual(py("true"), "True")
        self.assertEqual(py("false"), "False")
        self.assertEqual(py("class"), "class_")
        self.assertEqual(py("None"), "None")

    def test_operator_symbol_as_value(self) -> None:
        self.assertEqual(py("(reduce + xs)"), 'reduce(__ops__["+"], xs)')


class CallEmissionTests(unittest.TestCase):
    def test_binary_operator_is_infix(self) -> None:
        self.assertEqual(py("(+ 1 2)"), "(1 + 2)")
        self.assertEqual(py("(> 5 3)"), "(5 > 3)")
        self.assertEqual(py("(* x x)"), "(x * x)")

    def test_alias_and_word_operators(self) -> None:
        self.assertEqual(py("(= a b)"), "(a == b)")
        self.assertEqual(py("(and a b)"), "(a and b)")

    def test_negative_left_operand_is_grouped(self) -> None:
        self.assertEqual(py("(** -1 2)"), "((-1) ** 2)")

    def test_operator_with_other_arity_is_a_call(self) -> None:
        self.assertEqual(py("(+ 1 2 3)"), '__ops__["+"](1, 2, 3)')
        self.assertEqual(py("(- x)"), '__ops__["-"](x)')
        self.assertEqual(py("(not x)"), '__ops__["not"](x)')

    def test_unknown_operator_like_head_is_parenthesized(self) -> None:
        self.assertEqual(py("(math.sqrt 16)"), "(math.sqrt)(16)")
        self.assertEqual(py("(os.path.join a b)"), "(os.path.join)(a, b)")

    def test_plain_function_call(self) -> None:
        self.assertEqual(py('(print "a" 1 x)'), 'print("a", 1, x)')
        self.assertEqual(py("(f)"), "f()")

    def test_nested_calls_keep_argument_order(self) -> None:
        self.assertEqual(py("(f (g 1) (+ 2 3) 4)"), "f(g(1), (2 + 3), 4)")

    def test_non_symbol_head_fails(self) -> None:
        with self.assertRaises(EmitError) as ctx:
            py("(1 2 3)")
        self.assertIn("operator must be a symbol", str(ctx.exception))
        with self.assertRaises(EmitError):
            py("((f) 1)")


class SpecialFormTests(unittest.TestCase):
    def test_if(self) -> None:
        self.assertEqual(py("(if (> 5 3) 10 20)"), "(10 if (5 > 3) else 20)")

    def test_if_arity(self) -> None:
        with self.assertRaises(EmitError) as ctx:
            py("(if 1 2)")
        self.assertIn("if requires 3 arguments", str(ctx.exception))
        with self.assertRaises(EmitError):
            py("(if 1 2 3 4)")

    def test_let(self) -> None:
        self.assertEqual(
            py("(let ((a 10) (b 20)) (+ a b))"),
            "(lambda a: (lambda b: (a + b))(20))(10)",
        )
        self.assertEqual(py("(let () 1)"), "(lambda: 1)()")

    def test_let_shape_errors(self) -> None:
        cases = {
            "(let x 1)": "let bindings must be a list",
            "(let ((a)) a)": "each binding must be (name value)",
            "(let (a) a)": "each binding must be (name value)",
            "(let ((1 2)) 1)": "binding name must be a symbol",
            "(let ((a 1)))": "let requires 2 arguments",
            "(let ((a-b 1)) 1)": "not a valid Python identifier",
            "(let ((nil 5)) nil)": "binding name 'nil' is reserved",
            "(let ((not 5)) not)": "binding name 'not' is reserved",
            "(let ((__ops__ 1)) (+ 1 2 3))": "binding name '__ops__' is reserved",
        }
        for source, message in cases.items():
            with self.subTest(source=source):
                with self.assertRaises(EmitError) as ctx:
                    py(source)
                self.assertIn(message, str(ctx.exception))

    def test_lambda(self) -> None:
        self.assertEqual(py("(lambda ((x int)) (* x x))"), "(lambda x: (x * x))")
        self.assertEqual(py("(lambda ((a int) (b float)) a)"), "(lambda a, b: a)")
        self.assertEqual(py("(lambda () 1)"), "(lambda: 1)")

    def test_lambda_shape_errors(self) -> None:
        cases = {
            "(lambda x x)": "lambda params must be a list",
            "(lambda (x) x)": "lambda param must be (name type)",
            "(lambda ((x)) x)": "lambda param must be (name type)",
            "(lambda ((x 1)) x)": "lambda param name and type must be symbols",
            '(lambda (("x" int)) 1)': "lambda param name and type must be symbols",
            "(lambda ((x int) (x int)) x)": "duplicate parameter name",
            "(lambda ((x int)))": "lambda requires 2 arguments",
            "(lambda ((and int)) and)": "parameter name 'and' is reserved",
            "(lambda ((true bool)) true)": "parameter name 'true' is reserved",
        }
        for source, message in cases.items():
            with self.subTest(source=source):
                with self.assertRaises(EmitError) as ctx:
                    py(source)
                self.assertIn(message, str(ctx.exception))

    def test_keyword_names_are_escaped(self) -> None:
        self.assertEqual(py("(lambda ((from int)) from)"), "(lambda from_: from_)")

    def test_do(self) -> None:
        self.assertEqual(py("(do)"), "None")
        self.assertEqual(py("(do (f) (g) 3)"), "(lambda: (f(), g(), 3,)[-1])()")
        self.assertEqual(py("(do 1)"), "(lambda: (1,)[-1])()")

    def test_list_primitives(self) -> None:
        self.assertEqual(py("(car xs)"), "xs[0]")
        self.assertEqual(py("(cdr xs)"), "xs[1:]")
        self.assertEqual(py("(cons 1 xs)"), "[1, *xs]")
        self.assertEqual(py("(cons 1 (cons 2 xs))"), "[1, *[2, *xs]]")

    def test_negative_sequence_operand_is_grouped(self) -> None:
        self.assertEqual(py("(car -1)"), "(-1)[0]")
        self.assertEqual(py("(cdr -1)"), "(-1)[1:]")

    def test_list_primitive_arity(self) -> None:
        for source in ("(car)", "(car a b)", "(cdr)", "(cdr a b)", "(cons 1)", "(cons 1 2 3)"):
            with self.subTest(source=source):
                with self.assertRaises(EmitError):
                    py(source)

    def test_quote(self) -> None:
        self.assertEqual(py("'()"), "[]")
        self.assertEqual(py("'(1 \"a\" b (2.5))"), '[1, "a", "b", [2.5]]')
        self.assertEqual(py("(quote sym)"), '"sym"')
        with self.assertRaises(EmitError):
            py("(quote a b)")

    def test_forms_nest_inside_each_other(self) -> None:
        source = "(lambda ((n int)) (if (<= n 1) (do 1) (let ((m (- n 1))) (* n m))))"
        text = py(source)
        ast.parse(text, mode="eval")
        self.assertTrue(text.startswith("(lambda n: "))

    def test_no_partial_output_on_failure(self) -> None:
        with self.assertRaises(EmitError):
            py("(f (g 1) (if 1 2))")


if __name__ == "__main__":  # pragma: no cover
    unittest.main(verbosity=2)
