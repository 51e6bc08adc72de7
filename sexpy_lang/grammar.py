SEXP_GRAMMAR = r"""
    start: form

    ?form: list
         | quoted
         | atom

    list: LPAR form* RPAR
    quoted: QUOTE form

    atom: STRING -> string
        | TOKEN  -> token

    LPAR: "("
    RPAR: ")"
    QUOTE: "'"
    STRING: /"(\\.|[^"\\])*"/s
    TOKEN: /[^ \t\r\n()"'][^ \t\r\n()]*/

    %ignore /[ \t\r\n]+/
"""
