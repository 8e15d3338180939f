# mock_exam/core/question_bank.py
# Fixed template bank used when no provider is configured or all of them fail

MCQ_TEMPLATES = [
    {
        "question": "Which data structure is most suitable for implementing a LRU cache?",
        "options": ["Queue", "Stack", "Hash map + Doubly linked list", "Binary heap"],
        "answer": 2,
        "topic": "programming_and_dsa"
    },
    {
        "question": "Which of the following is a lossless-join, dependency preserving normal form?",
        "options": ["1NF", "2NF", "3NF", "BCNF (not always dependency preserving)"],
        "answer": 2,
        "topic": "database_management"
    },
    {
        "question": "Which scheduling algorithm can lead to starvation without aging?",
        "options": ["Round Robin", "FCFS", "SJF", "Priority (preemptive)"],
        "answer": 3,
        "topic": "operating_systems"
    },
    {
        "question": "In networking, which layer is responsible for end-to-end reliable delivery?",
        "options": ["Application", "Transport", "Network", "Link"],
        "answer": 1,
        "topic": "computer_networks"
    },
    {
        "question": "Which of the following is NOT typically part of a CPU pipeline stage?",
        "options": ["Fetch", "Decode", "Execute", "Fragment"],
        "answer": 3,
        "topic": "computer_organization"
    },
    {
        "question": "Which language class is recognized by a deterministic finite automaton (DFA)?",
        "options": ["Context-sensitive", "Context-free", "Regular", "Recursively enumerable"],
        "answer": 2,
        "topic": "theory_of_computation"
    },
    {
        "question": "Which phase of a compiler performs lexical analysis?",
        "options": ["Frontend: Lexer", "Frontend: Parser", "Backend: Code generation", "Optimizer"],
        "answer": 0,
        "topic": "compiler_design"
    },
    {
        "question": "Which statement is TRUE about a simple undirected graph?",
        "options": [
            "Self-loops are allowed",
            "Multiple edges are allowed",
            "Degree sum equals twice the number of edges",
            "All nodes have the same degree"
        ],
        "answer": 2,
        "topic": "discrete_mathematics"
    }
]

NAT_TEMPLATES = [
    {
        "question": "Compute the determinant of [[1,2],[3,4]].",
        "answer": -2,
        "topic": "linear_algebra"
    },
    {
        "question": "If X~Bernoulli(p) with p=0.3, what is Var(X)? Enter as decimal.",
        "answer": 0.21,
        "topic": "probability_statistics"
    },
    {
        "question": "Find the derivative of f(x)=3x^2 at x=2.",
        "answer": 12,
        "topic": "programming_and_dsa"
    }
]

MCQ_EXPLANATION = "Reason about definitions and standard properties; select the logically valid option."
NAT_EXPLANATION = "Apply standard formula or computation to obtain the numeric result."
